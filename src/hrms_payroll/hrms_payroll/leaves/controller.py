from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import domain_error_response, failure_response, invalid_action_response, json_body, production_guard
from ..common.validators import require_enum, require_int
from ..container import Container
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import DomainError, NotFoundError
from .model import LeaveBalance, LeavePolicy


def _first(data: dict, *keys: str):
    """Value of the first key present; older clients still send ``requestId``/``approverId``."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="api_leaves_post")
    def api_leaves_post():
        data = json_body()
        action = data.get("action")
        if action not in {"apply", "approve", "reject"}:
            return invalid_action_response()

        try:
            if action == "apply":
                req = container.leave_service.apply(
                    user_id=require_int(data.get("userId"), "userId"),
                    leave_type=require_enum(LeaveType, data.get("leaveType"), "Leave type"),
                    start_date=parse_iso_date(data.get("startDate")),
                    end_date=parse_iso_date(data.get("endDate")),
                    reason=data.get("reason", ""),
                )
                return jsonify(req.to_dict()), 201

            request_id = require_int(_first(data, "leaveDocId", "requestId"), "leaveDocId")
            if action == "approve":
                approver_id = _first(data, "adminId", "approverId")
                result = container.leave_service.approve(
                    request_id, require_int(approver_id, "adminId") if approver_id is not None else None
                )
                return jsonify(
                    {
                        "request": result.request.to_dict(),
                        "daysRequested": result.days_requested,
                        "sideEffects": [o.to_dict() for o in result.side_effects],
                    }
                )

            req = container.leave_service.reject(request_id, data.get("reason") or data.get("rejectionReason") or "")
            return jsonify(req.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response(f"{action} leave request")

    @app.route("/api/leaves", methods=["GET"], endpoint="api_leaves_get")
    def api_leaves_get():
        try:
            status = request.args.get("status")
            status = require_enum(LeaveStatus, status, "Status") if status else None
            user_id = request.args.get("userId")

            if user_id:
                requests = container.leave_service.list_for_user(require_int(user_id, "userId"))
                if status:
                    requests = [r for r in requests if r.status == status]
            elif status == LeaveStatus.PENDING:
                requests = container.leave_service.list_pending()
            else:
                requests = container.leave_service.list_all(status=status)
            return jsonify([r.to_dict() for r in requests])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch leave requests")

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="api_leave_detail")
    def api_leave_detail(request_id: int):
        try:
            return jsonify(container.leave_service.get(request_id).to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch leave request")

    # -------- Balances --------
    @app.route("/api/leave-balances", methods=["GET"], endpoint="api_leave_balances_get")
    def api_leave_balances_get():
        try:
            user_id = require_int(request.args.get("userId"), "userId")
            year = request.args.get("year")
            tracker = container.leave_balance_tracker

            if request.args.get("leaveType"):
                leave_type = require_enum(LeaveType, request.args["leaveType"], "Leave type")
                balance = tracker.get_balance(user_id, leave_type, require_int(year, "year") if year else container.clock().year)
                if not balance:
                    raise NotFoundError("Leave balance not found")
                return jsonify(balance.to_dict())

            year = require_int(year, "year") if year else None
            return jsonify(
                {
                    "balances": [b.to_dict() for b in tracker.list_for_user(user_id, year)],
                    "totalAllowedDays": tracker.total_allowed_days(user_id, year),
                }
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch leave balances")

    @app.route("/api/leave-balances", methods=["PUT"], endpoint="api_leave_balances_put")
    def api_leave_balances_put():
        try:
            balance = container.leave_balance_tracker.set_balance(LeaveBalance.from_dict(json_body()))
            return jsonify(balance.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("update leave balance")

    @app.route("/api/leave-balances/init", methods=["POST"], endpoint="api_leave_balances_init")
    def api_leave_balances_init():
        try:
            user_id = require_int(json_body().get("userId"), "userId")
            created = container.leave_balance_tracker.initialize_for_user(user_id)
            return jsonify([b.to_dict() for b in created]), 201 if created else 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("initialize leave balances")

    @app.route("/api/leave-balances/reconcile", methods=["POST"], endpoint="api_leave_balances_reconcile")
    def api_leave_balances_reconcile():
        try:
            data = json_body()
            year = data.get("year")
            balance = container.leave_balance_tracker.reconcile(
                require_int(data.get("userId"), "userId"),
                require_enum(LeaveType, data.get("leaveType"), "Leave type"),
                require_int(year, "year") if year is not None else container.clock().year,
            )
            return jsonify(balance.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("reconcile leave balance")

    # -------- Policies --------
    @app.route("/api/leave-policies", methods=["GET"], endpoint="api_leave_policies_get")
    def api_leave_policies_get():
        try:
            if request.args.get("leaveType"):
                leave_type = require_enum(LeaveType, request.args["leaveType"], "Leave type")
                policy = container.leave_policy_service.get_policy(leave_type)
                if not policy:
                    raise NotFoundError("Leave policy not found")
                return jsonify(policy.to_dict())
            return jsonify([p.to_dict() for p in container.leave_policy_service.list_policies()])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch leave policies")

    @app.route("/api/leave-policies", methods=["PUT"], endpoint="api_leave_policies_put")
    def api_leave_policies_put():
        try:
            policy = container.leave_policy_service.set_policy(LeavePolicy.from_dict(json_body()))
            return jsonify(policy.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("update leave policy")

    @app.route("/api/leave-policies/init", methods=["POST"], endpoint="api_leave_policies_init")
    def api_leave_policies_init():
        forbidden = production_guard()
        if forbidden:
            return forbidden
        try:
            created = container.leave_policy_service.initialize_default_policies()
            return jsonify([p.to_dict() for p in created]), 201 if created else 200
        except Exception:
            return failure_response("initialize leave policies")
