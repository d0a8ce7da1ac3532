import sys
import os
import logging
from typing import List, Optional
try:
    import typer
    from rich.console import Console
    from rich.table import Table
    from rich.panel import Panel
    from rich.markup import escape
except ImportError:
    print('Error: CLI dependencies not found.')
    print('Please install with: pip install typer rich')
    sys.exit(1)
from .uri import HZURI, IndexedValue, is_sensitive
from .utils import ENV_PROPERTIES, get_env_defaults, parse_property_options, redact_target
from .diagnostics import Diagnostics
app = typer.Typer(help='hzjdbc - Hazelcast JDBC URL inspector', no_args_is_help=True, add_completion=False)
console = Console()
PROP_HELP = 'Default property as key=value (repeatable). URL parameters override it.'

@app.callback()
def hzjdbc_main():
    if os.environ.get('HZJDBC_DEBUG', '').lower() in ('1', 'true', 'yes'):
        logging.basicConfig(level=logging.DEBUG, format='%(name)s %(levelname)s %(message)s')

def hzjdbc_defaults(props: Optional[List[str]]) -> dict:
    defaults = get_env_defaults()
    try:
        defaults.update(parse_property_options(props))
    except ValueError as e:
        console.print(f'[bold red]Error:[/bold red] {escape(str(e))}')
        raise typer.Exit(code=2)
    return defaults

def hzjdbc_parse(url: str, props: Optional[List[str]]):
    parsed = HZURI.parse(url, hzjdbc_defaults(props))
    if parsed is None:
        console.print(f'[red]Not a Hazelcast JDBC URL:[/red] {escape(redact_target(url))}')
        raise typer.Exit(code=1)
    return parsed

@app.command(name='check', help='Tell whether a URL is a Hazelcast JDBC URL.\n\nUsage: hzjdbc check <url>')
def hzjdbc_check(url: str=typer.Argument(..., help='JDBC URL')):
    if HZURI.accepts(url):
        console.print('[green]Recognized[/green]')
    else:
        console.print('[red]Not recognized[/red]')
        raise typer.Exit(code=1)

@app.command(name='parse', help='Show authorities, schema and properties of a URL.')
def hzjdbc_parse_cmd(url: str=typer.Argument(..., help='JDBC URL'), prop: Optional[List[str]]=typer.Option(None, '--prop', '-p', help=PROP_HELP), as_json: bool=typer.Option(False, '--json', help='Print JSON instead of a table')):
    parsed = hzjdbc_parse(url, prop)
    props = {}
    for name, value in parsed.properties.items():
        props[name] = '***' if is_sensitive(name) else value.as_property_value()
    if as_json:
        console.print_json(data={'authorities': list(parsed.authorities), 'schema': parsed.schema, 'raw_authority': parsed.raw_authority, 'properties': props})
        return
    console.print(Panel(f'[bold white]Schema:[/bold white] {escape(parsed.schema)}\n[bold white]Authorities:[/bold white] {escape(", ".join(parsed.authorities))}', title='Hazelcast JDBC URL'))
    if not props:
        console.print('[dim]No properties.[/dim]')
        return
    table = Table(title='Properties')
    table.add_column('Name', style='cyan')
    table.add_column('Kind', style='magenta')
    table.add_column('Value', style='green')
    for name, value in parsed.properties.items():
        kind = 'indexed' if isinstance(value, IndexedValue) else 'scalar'
        table.add_row(escape(name), kind, escape(props[name]))
    console.print(table)

@app.command(name='get', help='Print the value of one property.\n\nUsage: hzjdbc get <url> <key>')
def hzjdbc_get(url: str=typer.Argument(..., help='JDBC URL'), key: str=typer.Argument(..., help='Property name'), prop: Optional[List[str]]=typer.Option(None, '--prop', '-p', help=PROP_HELP)):
    parsed = hzjdbc_parse(url, prop)
    value = HZURI.property_value(parsed, key)
    if value is None:
        console.print(f"[yellow]Property '{escape(key)}' is not set.[/yellow]")
        raise typer.Exit(code=1)
    console.print(escape(value), highlight=False, soft_wrap=True)

@app.command(name='doctor', help='Report syntax problems in a URL.')
def hzjdbc_doctor(url: str=typer.Argument(..., help='JDBC URL'), prop: Optional[List[str]]=typer.Option(None, '--prop', '-p', help=PROP_HELP)):
    diag = Diagnostics(url, hzjdbc_defaults(prop))
    report = diag.doctor()
    console.print(f"[bold]Target:[/bold] {escape(report['target'])}")
    if report['status'] == 'healthy':
        console.print('[green]Status: Healthy[/green]')
    elif report['status'] == 'healthy_with_warnings':
        console.print('[yellow]Status: Healthy with warnings[/yellow]')
    else:
        console.print(f"[red]Status: {report['status']}[/red]")
    if 'authorities' in report:
        console.print(f"Authorities: {escape(', '.join(report['authorities']))}")
        console.print(f"Schema: {escape(report['schema'])}")
    if report['issues']:
        console.print('[red]Issues found:[/red]')
        for issue in report['issues']:
            console.print(f'  - {escape(issue)}')
    if report['status'] == 'unrecognized':
        raise typer.Exit(code=1)

@app.command(name='env')
def hzjdbc_env():
    table = Table(title='Environment Variables')
    table.add_column('Variable', style='cyan')
    table.add_column('Value', style='green')
    table.add_column('Property', style='white')
    for var, prop in ENV_PROPERTIES.items():
        val = os.environ.get(var)
        if val is None:
            val = 'Not Set'
        elif is_sensitive(prop):
            val = '***'
        table.add_row(var, escape(val), prop)
    table.add_row('HZJDBC_DEBUG', os.environ.get('HZJDBC_DEBUG', 'False'), 'Enable Debug Logging')
    console.print(table)
if __name__ == '__main__':
    app()
