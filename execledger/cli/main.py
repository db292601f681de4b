# execledger/cli/main.py
"""
CLI for verifying, inspecting and producing tamper-evident execution ledger artifacts.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from execledger.config import get_artifacts_dir
from execledger.integration.auditor import ChainAuditor
from execledger.logging_config import setup_logging
from execledger.storage import DirectoryStore
from execledger.verify.verifier import verify_files

app = typer.Typer(
    name="execledger",
    help="Verify, inspect and produce tamper-evident execution ledger artifacts",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log chain activity to stderr"),
):
    """Manage execution chains, certificates and their verification."""
    setup_logging("DEBUG" if verbose else None)


def _load_json(path: Path, what: str) -> dict:
    if not path.exists():
        console.print(f"[red]{what} file not found: {path}[/]")
        raise typer.Exit(2)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]{what} is not valid JSON: {e}[/]")
        raise typer.Exit(2)


@app.command()
def verify(
    chain: Path = typer.Argument(..., help="Exported chain artifact (execution-chain.json)"),
    certificate: Path = typer.Argument(..., help="Certificate artifact (certificate.json)"),
    public_key: Path = typer.Argument(..., help="public-key.json, PEM file, or hex DER"),
    result_out: Optional[Path] = typer.Option(
        None, "--result-out", "-o", help="Write verification-result.json here"
    ),
):
    """Independently verify hash chain, chain hash and certificate signature."""
    for path, what in ((chain, "Chain artifact"), (certificate, "Certificate"), (public_key, "Public key")):
        if not path.exists():
            console.print(f"[red]{what} file not found: {path}[/]")
            raise typer.Exit(2)

    try:
        report = verify_files(chain, certificate, public_key)
    except (ValueError, KeyError, AttributeError) as e:
        console.print(f"[red]Could not read artifacts: {e}[/]")
        raise typer.Exit(2)

    console.print("[bold]=== Independent Verification ===[/]")
    for check in report.checks:
        status = "[green]PASS[/]" if check.passed else "[red]FAIL[/]"
        console.print(f"{status} {check.label}")
        if check.detail:
            console.print(f"     {check.detail}", markup=False)

    if result_out:
        result_out.parent.mkdir(parents=True, exist_ok=True)
        result_out.write_text(json.dumps(report.to_result_artifact(), indent=2) + "\n", encoding="utf-8")

    if report.verified:
        console.print("[green]ALL CHECKS PASSED[/]")
    else:
        console.print("[red]VERIFICATION FAILED[/]")
        raise typer.Exit(1)


@app.command()
def inspect(
    chain: Path = typer.Argument(..., help="Exported chain artifact to display"),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of most recent events to show"),
):
    """Show the most recent events of an exported chain."""
    artifact = _load_json(chain, "Chain artifact")
    events = artifact.get("events", [])

    console.print(
        f"[bold]{artifact.get('chain_id')}[/] | status: {artifact.get('status')} | "
        f"events: {len(events)} | chain_hash: {artifact.get('chain_hash') or '—'}"
    )
    if not events:
        console.print("[yellow]No events recorded in this chain.[/]")
        return

    table = Table(title="Recorded Events")
    table.add_column("Seq", justify="right")
    table.add_column("Type")
    table.add_column("Agent")
    table.add_column("Organization")
    table.add_column("Timestamp")
    table.add_column("Hash")
    table.add_column("Auth")

    for e in events[-limit:]:
        auth = e.get("owner_user_id", "") if e.get("authorization_event") else ""
        table.add_row(
            str(e.get("sequence")),
            str(e.get("event_type")),
            str(e.get("agent_name")),
            str(e.get("organization", "")),
            str(e.get("timestamp")),
            str(e.get("event_hash", ""))[:16] + "…",
            auth,
        )

    console.print(table)


@app.command()
def demo(
    out: Optional[Path] = typer.Option(None, "--out", help="Artifact directory (overrides EXECLEDGER_ARTIFACTS_DIR)"),
    chain_id: str = typer.Option("cve-2026-4821-remediation", "--chain-id", help="Chain id to record under"),
):
    """Record a sample remediation workflow, seal it and export all artifacts."""
    out_dir = get_artifacts_dir(out)
    auditor = ChainAuditor(chain_id, organization="CyberSafe Inc.")

    auditor.log("vulnerability_detected", "sentinel-x9", {"cve": "CVE-2026-4821", "severity": "high",
                                                          "module": "auth/login.py"})
    auditor.log("analysis_completed", "sentinel-x9", {"root_cause": "unparameterized SQL query"})
    auditor.authorize("instruction_received", "Project Owner", "owner-ciso-1",
                      {"instruction_summary": "Patch the login query with parameter binding and add a regression test"})
    auditor.log("fix_committed", "sentinel-x9", {"files": ["auth/login.py", "tests/test_login.py"]})
    auditor.log("pr_opened", "sentinel-x9", {"title": "Fix SQL injection in login (CVE-2026-4821)"})
    auditor.authorize("pr_approved", "review-bot", "review-bot-1", {"checks": "passed"})
    auditor.log("issue_closed", "sentinel-x9", {"resolution": "remediated"})

    cert = auditor.seal()
    report = auditor.export(DirectoryStore(out_dir))

    console.print(f"[green]Recorded {auditor.chain.length} events in chain '{chain_id}'[/]")
    console.print(f"  chain_hash: {cert.chain_hash}")
    console.print(f"  signature:  {cert.signature[:40]}...")
    console.print(f"  self-verification: {'PASS' if report.verified else 'FAIL'}")
    console.print(f"[green]Artifacts written to {out_dir}[/]")


if __name__ == "__main__":
    app()
