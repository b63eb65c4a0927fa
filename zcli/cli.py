from typing import Optional, Tuple
from functools import wraps
import asyncio
import click
import typer
from rich.console import Console
from rich.table import Table
from rich import box
from .config import get_settings
from .exceptions import ZcliError, AddressNotFound
from .logging_config import setup_logging, get_logger
from .models import Config, TransferInfo
from .repository import JsonConfigRepository
from .providers import default_connector
from .networks import default_network, probe_networks
from .wallets import add_wallet, list_wallets, remove_wallet, default_wallet
from .queries import account_info, tx_info
from .operations import transfer as transfer_op, deposit as deposit_op

app = typer.Typer(help="Command line wallet for zkSync")
wallets = typer.Typer(help="Manage locally stored wallets", invoke_without_command=True)
networks = typer.Typer(help="List and select networks", invoke_without_command=True)
app.add_typer(wallets, name="wallets")
app.add_typer(networks, name="networks")
console = Console()
logger = get_logger(__name__)

NETWORK_OPTION = typer.Option(None, "--network", "-n", help="Network to use, defaults to the configured one")

def _load() -> Tuple[JsonConfigRepository, Config]:
    repository = JsonConfigRepository(get_settings().resolve_config_path())
    return repository, repository.load()

def handle_errors(func):
    """Print failures and exit with status 1"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ZcliError as e:
            console.print(f"[red]❌ Error: {e.message}[/red]")
            raise typer.Exit(code=1)
        except click.ClickException:
            raise
        except Exception as e:
            logger.error(f"Command {func.__name__} failed: {str(e)}", exc_info=True)
            console.print(f"[red]❌ Error: {str(e)}[/red]")
            raise typer.Exit(code=1)
    return wrapper

@app.callback()
def main():
    # Logging is configured once per invocation, before any command runs
    settings = get_settings()
    setup_logging("zcli", settings.log_dir, settings.log_level)

@app.command()
@handle_errors
def account(address: Optional[str] = typer.Argument(None, help="Account address, defaults to the default wallet"),
            network: Optional[str] = NETWORK_OPTION):
    """Show account id, nonce and balances"""
    _, config = _load()
    address = address or config.default_wallet
    if not address:
        raise AddressNotFound()
    info = asyncio.run(account_info(address, network or config.network))
    console.print_json(data=info.model_dump(mode="json"))

@app.command()
@handle_errors
def tx(tx_hash: str, network: Optional[str] = NETWORK_OPTION):
    """Show transaction status and details"""
    _, config = _load()
    info = asyncio.run(tx_info(tx_hash, network or config.network))
    console.print_json(data=info.to_dict())

def _transfer_info(config: Config, json_input: Optional[str], from_: Optional[str], to: Optional[str],
                   token: Optional[str], amount: Optional[str], to_defaults_to_sender: bool) -> TransferInfo:
    if json_input:
        return TransferInfo.model_validate_json(json_input)
    sender = from_ or config.default_wallet
    if not sender:
        raise AddressNotFound()
    if to is None and to_defaults_to_sender:
        to = sender
    if not (to and token and amount):
        raise typer.BadParameter("--to, --token and --amount are required unless --json is given")
    return TransferInfo(token=token, amount=amount, to=to, from_=sender)

@app.command()
@handle_errors
def transfer(to: Optional[str] = typer.Option(None, "--to", help="Recipient address"),
             token: Optional[str] = typer.Option(None, "--token", help="Token symbol or address"),
             amount: Optional[str] = typer.Option(None, "--amount", help="Amount in display units"),
             from_: Optional[str] = typer.Option(None, "--from", help="Sender wallet, defaults to the default wallet"),
             json_input: Optional[str] = typer.Option(None, "--json", help="Transfer as a JSON object"),
             network: Optional[str] = NETWORK_OPTION):
    """Transfer tokens within the L2 network"""
    _, config = _load()
    info = _transfer_info(config, json_input, from_, to, token, amount, to_defaults_to_sender=False)
    tx_hash = asyncio.run(transfer_op(config, info, network or config.network))
    console.print(tx_hash)

@app.command()
@handle_errors
def deposit(to: Optional[str] = typer.Option(None, "--to", help="L2 recipient, defaults to the sender"),
            token: Optional[str] = typer.Option(None, "--token", help="Token symbol or address"),
            amount: Optional[str] = typer.Option(None, "--amount", help="Amount in display units"),
            from_: Optional[str] = typer.Option(None, "--from", help="Sender wallet, defaults to the default wallet"),
            json_input: Optional[str] = typer.Option(None, "--json", help="Deposit as a JSON object"),
            network: Optional[str] = NETWORK_OPTION):
    """Deposit tokens from the settlement chain"""
    _, config = _load()
    info = _transfer_info(config, json_input, from_, to, token, amount, to_defaults_to_sender=True)
    tx_hash = asyncio.run(deposit_op(config, info, network or config.network))
    console.print(tx_hash)

@networks.callback()
@handle_errors
def networks_main(ctx: typer.Context):
    """List reachable networks"""
    if ctx.invoked_subcommand is not None:
        return
    probes = asyncio.run(probe_networks(default_connector()))
    table = Table(title="Networks", box=box.SIMPLE)
    table.add_column("Network", style="cyan")
    table.add_column("Status", justify="center")
    for probe in probes:
        status = "[green]available[/green]" if probe.available else "[red]unreachable[/red]"
        table.add_row(probe.network.value, status)
    console.print(table)

@networks.command("default")
@handle_errors
def networks_default(network: Optional[str] = typer.Argument(None, help="Network to make the default")):
    """Show or set the default network"""
    repository, config = _load()
    console.print(default_network(config, network, repository=repository).value)

@wallets.callback()
@handle_errors
def wallets_main(ctx: typer.Context):
    """List stored wallets"""
    if ctx.invoked_subcommand is not None:
        return
    _, config = _load()
    addresses = list_wallets(config)
    if not addresses:
        console.print("[yellow]No wallets found[/yellow]")
        return
    for address in addresses:
        marker = " [green](default)[/green]" if address == config.default_wallet else ""
        console.print(f"{address}{marker}")

@wallets.command("add")
@handle_errors
def wallets_add(privkey: Optional[str] = typer.Option(None, "--privkey", help="Import this private key instead of generating one")):
    """Generate or import a wallet"""
    repository, config = _load()
    console.print(add_wallet(config, privkey, repository=repository))

@wallets.command("remove")
@handle_errors
def wallets_remove(address: str):
    """Forget a wallet"""
    repository, config = _load()
    remove_wallet(config, address, repository=repository)

@wallets.command("default")
@handle_errors
def wallets_default(address: Optional[str] = typer.Argument(None, help="Wallet to make the default")):
    """Show or set the default wallet"""
    repository, config = _load()
    current = default_wallet(config, address, repository=repository)
    console.print(current if current else "[yellow]No default wallet[/yellow]")
