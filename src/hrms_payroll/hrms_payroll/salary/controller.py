from __future__ import annotations

from dataclasses import replace

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import domain_error_response, failure_response, invalid_action_response, json_body, production_guard
from ..common.validators import require_enum, require_int, require_non_negative
from ..container import Container
from ..core.enums import PaymentStatus
from ..core.exceptions import DomainError, NotFoundError
from .model import Allowance, Deduction, SalaryConfig


def _optional_list(data: dict, key: str, parse):
    items = data.get(key)
    if items is None:
        return None
    return [parse(item) for item in items]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/salary", methods=["POST"], endpoint="api_salary_post")
    def api_salary_post():
        data = json_body()
        action = data.get("action")
        if action not in {"generate", "recalculate", "paymentStatus"}:
            return invalid_action_response()

        svc = container.salary_service
        try:
            if action == "paymentStatus":
                salary = svc.update_payment_status(
                    require_int(data.get("salaryId"), "salaryId"),
                    require_enum(PaymentStatus, data.get("status"), "Payment status"),
                    parse_iso_date(data["paymentDate"]) if data.get("paymentDate") else None,
                )
                return jsonify(salary.to_dict())

            user_id = require_int(data.get("userId"), "userId")
            month = require_int(data.get("month"), "month")
            year = require_int(data.get("year"), "year")

            base_salary = data.get("baseSalary")
            base_salary = require_non_negative(base_salary, "Base salary") if base_salary is not None else None
            allowances = _optional_list(data, "allowances", Allowance.from_dict)
            deductions = _optional_list(data, "deductions", Deduction.from_dict)

            if action == "generate":
                salary = svc.generate(
                    user_id,
                    month,
                    year,
                    base_salary=base_salary,
                    allowances=allowances,
                    deductions=deductions,
                )
                return jsonify(salary.to_dict()), 201

            # Body inputs override the stored config field by field.
            config = svc.get_config(user_id)
            if config is None and base_salary is None:
                raise NotFoundError("Salary configuration not found for this employee")
            config = config or SalaryConfig(user_id=user_id, base_salary=base_salary)
            if base_salary is not None:
                config = replace(config, base_salary=base_salary)
            if allowances is not None:
                config = replace(config, allowances=tuple(allowances))
            if deductions is not None:
                config = replace(config, deductions=tuple(deductions))
            return jsonify(svc.recalculate(user_id, month, year, config).to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response(f"{action} salary")

    @app.route("/api/salary", methods=["GET"], endpoint="api_salary_get")
    def api_salary_get():
        svc = container.salary_service
        try:
            user_id = request.args.get("userId")
            status = request.args.get("status")

            if user_id and request.args.get("month"):
                salary = svc.get_salary(
                    require_int(user_id, "userId"),
                    require_int(request.args.get("month"), "month"),
                    require_int(request.args.get("year"), "year"),
                )
                if not salary:
                    raise NotFoundError("Salary record not found")
                return jsonify(salary.to_dict())

            if user_id:
                salaries = svc.list_for_user(require_int(user_id, "userId"))
            elif status:
                salaries = svc.list_by_status(require_enum(PaymentStatus, status, "Payment status"))
            else:
                salaries = svc.list_all()
            return jsonify([s.to_dict() for s in salaries])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch salary records")

    # -------- Configuration --------
    @app.route("/api/salary-configs", methods=["GET"], endpoint="api_salary_configs_get")
    def api_salary_configs_get():
        svc = container.salary_service
        try:
            if request.args.get("userId"):
                config = svc.get_config(require_int(request.args["userId"], "userId"))
                if not config:
                    raise NotFoundError("Salary configuration not found for this employee")
                return jsonify(config.to_dict())
            return jsonify([c.to_dict() for c in svc.list_configs()])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch salary configurations")

    @app.route("/api/salary-configs", methods=["PUT"], endpoint="api_salary_configs_put")
    def api_salary_configs_put():
        try:
            update = container.salary_service.set_config(SalaryConfig.from_dict(json_body()))
            return jsonify(
                {
                    "config": update.config.to_dict(),
                    "sideEffects": [o.to_dict() for o in update.side_effects],
                }
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("save salary configuration")

    @app.route("/api/salary-configs/init", methods=["POST"], endpoint="api_salary_configs_init")
    def api_salary_configs_init():
        forbidden = production_guard()
        if forbidden:
            return forbidden
        try:
            user_ids = [require_int(u, "userIds") for u in json_body().get("userIds") or []]
            created = container.salary_service.initialize_default_configs(user_ids)
            return jsonify([c.to_dict() for c in created]), 201 if created else 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("initialize salary configurations")
