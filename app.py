from src.hrms_payroll.hrms_payroll.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"], threaded=True)
