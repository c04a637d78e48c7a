import json
import logging

from flask import Flask, render_template, request, session

from loan_payoff import config
from loan_payoff.data_models import LoanParameters
from loan_payoff.engine import compute_schedule
from loan_payoff.errors import InvalidInputError
from loan_payoff.formatter import (
    CURRENCY_FORMATS,
    break_even_message,
    chart_series,
    format_currency,
    format_date,
    format_payoff_time,
    get_currency_format,
)
from loan_payoff.refinance import analyze_refinance
from loan_payoff.utils import decimal_from_str, parse_date

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = config.ASSET_VERSION
app.secret_key = config.SECRET_KEY


def _selected_locale(form) -> str:
    locale = form.get("currency") or session.get("locale") or config.DEFAULT_LOCALE
    return locale if locale in CURRENCY_FORMATS else config.DEFAULT_LOCALE


def _form_decimal(form, name: str, default: str = "0"):
    raw = form.get(name, "").strip()
    return decimal_from_str(raw or default)


def _form_to_params(form) -> LoanParameters:
    start_raw = form.get("start_date", "").strip()
    term_years = _form_decimal(form, "term_years")
    if term_years.is_finite() and term_years > config.MAX_TERM_YEARS:
        raise InvalidInputError(f"Invalid input: Loan term must not exceed {config.MAX_TERM_YEARS} years")
    return LoanParameters(
        principal=_form_decimal(form, "principal"),
        annual_rate=_form_decimal(form, "annual_rate"),
        term_years=term_years,
        extra_monthly_payment=_form_decimal(form, "extra_payment"),
        start_date=parse_date(start_raw) if start_raw else None,
    )


def _loan_view(result, fmt) -> dict:
    """Prepare an amortization result for the template."""
    return {
        "standard_payment": format_currency(result.monthly_payment, fmt),
        "payoff_time": format_payoff_time(result.months_to_payoff),
        "interest_saved": format_currency(result.total_interest_saved, fmt),
        "total_interest": format_currency(result.total_interest_paid, fmt),
        "paid_off": result.is_paid_off,
        "rows": [
            {
                "number": record.payment_number,
                "date": format_date(record.date),
                "interest": format_currency(record.interest_paid, fmt),
                "principal": format_currency(record.principal_paid, fmt),
                "balance": format_currency(record.remaining_balance, fmt),
            }
            for record in result.schedule
        ],
    }


def _render(active_tab: str, fmt, **context):
    return render_template(
        "index.html",
        active_tab=active_tab,
        currency_options=CURRENCY_FORMATS,
        locale=fmt.locale,
        currency_symbol=fmt.symbol,
        asset_version=app.config["ASSET_VERSION"],
        has_original_loan=bool(session.get("original_monthly_payment")),
        **context,
    )


@app.route("/", methods=["GET", "POST"])
def index():
    loan = None
    chart_payload = "null"
    error = None
    form = request.form

    locale = _selected_locale(form)
    session["locale"] = locale
    fmt = get_currency_format(locale)

    if request.method == "POST":
        try:
            result = compute_schedule(_form_to_params(form))
        except (InvalidInputError, ValueError) as exc:
            logger.info("Rejected loan input: %s", exc)
            error = str(exc)
        else:
            # Kept as the "original" payment for the refinance tab
            session["original_monthly_payment"] = str(result.monthly_payment)
            loan = _loan_view(result, fmt)
            chart_payload = json.dumps(chart_series(result.schedule, fmt))

    return _render("loan", fmt, loan=loan, chart_payload=chart_payload, error=error, form=form)


@app.post("/refinance")
def refinance():
    refi = None
    error = None
    form = request.form

    locale = _selected_locale(form)
    session["locale"] = locale
    fmt = get_currency_format(locale)

    try:
        new_payment, break_even = analyze_refinance(
            session.get("original_monthly_payment"),
            _form_decimal(form, "refinance_principal"),
            _form_decimal(form, "refinance_rate"),
            _form_decimal(form, "refinance_term"),
            _form_decimal(form, "closing_costs"),
        )
    except (InvalidInputError, ValueError) as exc:
        logger.info("Rejected refinance input: %s", exc)
        error = str(exc)
    else:
        refi = {
            "new_payment": format_currency(new_payment, fmt),
            "monthly_savings": format_currency(break_even.monthly_savings, fmt),
            "message": break_even_message(break_even),
            "is_valid": break_even.is_valid,
        }

    return _render("refinance", fmt, refi=refi, refi_error=error, chart_payload="null", form=form)


if __name__ == "__main__":
    config.configure_logging()
    print("Starting Loan Payoff web app...")
    app.run(host="0.0.0.0", port=config.PORT, debug=True)
