"""CLI output utilities and formatting."""

from datetime import datetime
from colorama import Fore, Style

BANNER = f"""
{Fore.YELLOW}╔══════════════════════════════════════╗{Style.RESET_ALL}
{Fore.YELLOW}║{Style.RESET_ALL}   {Fore.CYAN}{Style.BRIGHT}smk{Style.RESET_ALL}  {Fore.WHITE}snapshots, merges, keeps{Style.RESET_ALL}       {Fore.YELLOW}║{Style.RESET_ALL}
{Fore.YELLOW}║{Style.RESET_ALL}   {Fore.GREEN}local version control{Style.RESET_ALL}              {Fore.YELLOW}║{Style.RESET_ALL}
{Fore.YELLOW}╚══════════════════════════════════════╝{Style.RESET_ALL}
"""


def success(message: str) -> str:
    """Format success message in green."""
    return f"{Fore.GREEN}✓ {message}{Style.RESET_ALL}"


def info(message: str) -> str:
    """Format info message in cyan."""
    return f"{Fore.CYAN}→ {message}{Style.RESET_ALL}"


def warning(message: str) -> str:
    """Format warning message in yellow."""
    return f"{Fore.YELLOW}⚠ {message}{Style.RESET_ALL}"


def error(message: str) -> str:
    """Format error message in red."""
    return f"{Fore.RED}✗ {message}{Style.RESET_ALL}"


def format_timestamp(timestamp: int) -> str:
    """Format Unix timestamp to readable date."""
    return datetime.fromtimestamp(int(timestamp)).strftime("%a %b %d %H:%M:%S %Y")
