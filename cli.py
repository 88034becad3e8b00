"""
File: cli.py
CLI 'auditai' untuk mengaudit file smart contract lokal dan mencetak laporannya ke terminal.
"""

import asyncio
import logging
import os
import sys
from typing import List, Optional

import click
from dotenv import load_dotenv
load_dotenv()

import llm_analyzer
from config import settings
from errors import AuditError
from models import AuditResult, SuggestionItem
from prompts import PROVIDERS

logger = logging.getLogger(__name__)

SEPARATOR = " =================================="

def _section(title: str) -> List[str]:
    return ["", SEPARATOR, f"           {title}", "", SEPARATOR + " ", ""]

def format_report(result: AuditResult) -> str:
    """
    Menyusun laporan audit menjadi teks: laporan prosa, skor metrik, dan saran perbaikan.
    """
    lines = _section("AUDIT REPORT")
    lines.append(str(result.audit_report))

    lines += _section("METRIC SCORES")
    for metric in result.metric_scores:
        lines.append(f"{metric.metric}: {metric.score}/10")
        lines.append(f"Explanation: {metric.explanation}")
        lines.append("")

    lines += _section("SUGGESTIONS FOR IMPROVEMENTS")
    for item in result.suggestions:
        if isinstance(item, dict):
            suggestion = SuggestionItem.model_validate(item)
            lines.append(f"Category: {suggestion.category}")
            lines.append(f"Priority: {suggestion.priority}")
            lines.append(f"Suggestion: {suggestion.suggestion}")
        else:
            lines.append(f"Suggestion: {item}")
        lines.append("")

    return "\n".join(lines)

@click.group()
@click.version_option("1.0.0", prog_name="auditai")
def cli():
    """A CLI tool for smart contract auditing using an LLM."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

@cli.command()
@click.argument("file")
@click.option("--provider", type=click.Choice(sorted(PROVIDERS)), default="openai", show_default=True,
              help="Provider LLM yang kompatibel dengan OpenAI.")
@click.option("--model", default=None, help="Override model default provider.")
@click.option("--api-key", default=None, help="API key provider. Jika kosong akan ditanyakan.")
def check(file: str, provider: str, model: Optional[str], api_key: Optional[str]):
    """Analyze a smart contract"""
    contract_path = os.path.abspath(os.path.join(os.getcwd(), file))
    click.echo(f"checking file at path: {contract_path}")

    if not os.path.exists(contract_path):
        click.echo("File not found", err=True)
        sys.exit(1)

    if os.path.isdir(contract_path):
        click.echo(f"File is a directory, please provide a file ->  {contract_path}", err=True)
        sys.exit(1)

    if not api_key:
        api_key = click.prompt(f"Enter your {provider} API key", hide_input=True)

    # byte yang bukan UTF-8 diganti, tidak menggagalkan pembacaan
    try:
        with open(contract_path, "r", encoding="utf-8", errors="replace") as f:
            contract = f.read()
    except OSError as e:
        click.echo(f"Cannot read file: {e}", err=True)
        sys.exit(1)

    click.echo("Starting contract analysis... This may take a minute")
    try:
        client = llm_analyzer.LLMClient.from_provider(
            provider,
            api_key=api_key,
            model=model,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            force_tool_call=settings.LLM_FORCE_TOOL_CALL,
        )
        result = asyncio.run(llm_analyzer.analyze_contract(contract, client))
    except AuditError as e:
        logger.debug("Detail error analisis", exc_info=True)
        click.echo(f"Error analyzing contract: {e}", err=True)
        sys.exit(1)

    click.echo(format_report(result))

if __name__ == "__main__":
    cli()
