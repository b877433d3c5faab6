# Overview: Builds the analysis prompt for a period and asks Gemini for a Markdown report.

"""
Narrative Report Service

The Gemini response is opaque text, shown as-is. This module never raises for
provider problems: every failure resolves to a fixed user-facing message so
the report screen always has something to render.

FALLBACKS:
- no API key configured -> API_KEY_MISSING
- transport/HTTP error or malformed body -> CONNECTION_ERROR
- empty text -> EMPTY_REPORT
"""

from __future__ import annotations

import json

import httpx
from flask import current_app

from ..domain import AppSettings
from ..formatters import format_currency, format_number
from .aggregation_service import PeriodReport


API_KEY_MISSING = "API Key não configurada. Por favor, adicione sua chave de API."
CONNECTION_ERROR = (
    "Ocorreu um erro ao conectar com a IA. Verifique sua chave de API e tente novamente."
)
EMPTY_REPORT = "Não foi possível gerar o relatório."


def _compact(items: list[dict]) -> str:
    return json.dumps(items, ensure_ascii=False)


def build_prompt(report: PeriodReport, settings: AppSettings) -> str:
    summary = report.summary
    currency = settings.currency

    def money(value: float) -> str:
        return format_currency(value, currency)

    advances = _compact([
        {"date": a.date, "amount": a.amount, "desc": a.description}
        for a in report.advances
    ])
    entries = _compact([
        {
            "date": e.date,
            "total": e.total_hours,
            "extra": e.overtime_hours,
            "desc": e.description,
            "isHoliday": "SIM (Feriado/FDS)" if e.is_holiday else "Não",
        }
        for e in report.entries
    ])
    expenses = _compact([
        {
            "date": e.date,
            "ag": e.ag_number,
            "amount": e.amount,
            "category": e.category,
            "desc": e.description,
        }
        for e in report.expenses
    ])
    limit = format_number(settings.daily_limit)

    return f"""
Atue como um analista financeiro e de produtividade sênior.
Analise os seguintes dados do colaborador "{settings.user_name}" (regime: {limit}h normais, paga-se apenas horas extras) para o período: {report.period.label}.

DADOS DE GANHOS E ADIANTAMENTOS:
- O colaborador só recebe pagamento pelas HORAS EXTRAS (acima de {limit}h diárias).
- EXCEÇÃO: Em Fins de Semana/Feriados, TODAS as horas são consideradas EXTRAS (Valor Inteiro).
- Horas Totais Trabalhadas: {format_number(summary.total_hours)}h
- Horas Extras Totais: {format_number(summary.total_overtime)}h
- Valor Bruto (Extras): {money(summary.total_earnings)}
- (-) Total Adiantamentos: {money(summary.total_advances)} (Descontados do salário)
- (=) Valor Líquido a Receber: {money(summary.net_earnings)}

GESTAO DE FUNDO DE DESPESAS (Separado do Salário):
- Fundo Fixo Disponível: {money(summary.total_fund)}
- Total de Despesas Realizadas: {money(summary.total_expenses)}
- Saldo do Fundo (Fundo - Despesas): {money(summary.fund_balance)}

ADIANTAMENTOS (Impactam Salário):
{advances}

REGISTROS DE TRABALHO:
{entries}

DESPESAS (Impactam Fundo):
{expenses}

Por favor, gere um relatório conciso em Markdown (português do Brasil) contendo:
1. **Resumo Financeiro**: Confirme o valor líquido a receber (já descontando adiantamentos).
2. **Análise do Fundo de Despesas**: Analise se o fundo fixo ({money(summary.total_fund)}) foi suficiente para cobrir os gastos.
3. **Análise de Horas**: Breve comentário sobre a carga horária.
4. **Dicas**: Sugestões financeiras.

Mantenha o tom profissional e direto. Use emojis moderadamente.
""".strip()


def _extract_text(body: dict) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def generate_report(report: PeriodReport, settings: AppSettings, client: httpx.Client | None = None) -> str:
    """
    Ask Gemini for the period narrative.

    client: optional httpx.Client (tests pass one with a MockTransport).
    """
    config = current_app.config
    api_key = config.get("GEMINI_API_KEY")
    if not api_key:
        current_app.logger.warning("Narrative report requested without GEMINI_API_KEY")
        return API_KEY_MISSING

    url = f"{config['GEMINI_BASE_URL']}/models/{config['GEMINI_MODEL']}:generateContent"
    payload = {"contents": [{"parts": [{"text": build_prompt(report, settings)}]}]}

    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=config.get("GEMINI_TIMEOUT", 30))

    try:
        response = client.post(url, params={"key": api_key}, json=payload)
        response.raise_for_status()
        text = _extract_text(response.json())
    except (httpx.HTTPError, ValueError, AttributeError):
        current_app.logger.exception("Gemini request failed")
        return CONNECTION_ERROR
    finally:
        if owns_client:
            client.close()

    return text or EMPTY_REPORT
