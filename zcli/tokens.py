from typing import Dict, Iterable, Optional, Union
import re
from pydantic import BaseModel
from .exceptions import TokenNotFound, InvalidAmount

NATIVE_TOKEN_SYMBOL = "ETH"
NATIVE_TOKEN_ADDRESS = "0x" + "0" * 40

# Token id carried by transactions that move no token
NO_TOKEN_ID = -1

AMOUNT_RE = re.compile(r"^(\d*)(?:\.(\d*))?$")

class Token(BaseModel):
    id: int
    symbol: str
    decimals: int
    address: str = NATIVE_TOKEN_ADDRESS

def is_native_token(token: str) -> bool:
    """Native settlement-chain asset, deposited without an ERC-20 approval"""
    return token == NATIVE_TOKEN_SYMBOL or token.lower() == NATIVE_TOKEN_ADDRESS

def format_units(amount: Union[int, str], decimals: int) -> str:
    """Integer base units to a decimal string, keeping at least one fractional digit"""
    amount = int(amount)
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10 ** decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{frac_str or '0'}"

def parse_units(amount: str, decimals: int) -> int:
    """Decimal string to integer base units"""
    match = AMOUNT_RE.match(str(amount).strip())
    if not match or not (match.group(1) or match.group(2)):
        raise InvalidAmount(f"invalid amount: {amount}")
    whole, frac = match.group(1) or "0", (match.group(2) or "").rstrip("0")
    if len(frac) > decimals:
        raise InvalidAmount("fractional component exceeds decimals",
                            {"amount": amount, "decimals": decimals})
    return int(whole) * 10 ** decimals + int(frac.ljust(decimals, "0") or "0")

class TokenSet:
    """Token registry of one network"""

    def __init__(self, tokens: Iterable[Token]):
        self.tokens: Dict[str, Token] = {t.symbol: t for t in tokens}

    def resolve(self, token: str) -> Token:
        """Look a token up by symbol or by contract address"""
        if token in self.tokens:
            return self.tokens[token]
        for candidate in self.tokens.values():
            if candidate.address.lower() == token.lower():
                return candidate
        raise TokenNotFound(token)

    def find_by_id(self, token_id: int) -> Optional[Token]:
        for candidate in self.tokens.values():
            if candidate.id == token_id:
                return candidate
        return None

    def format_token(self, token: str, amount: Union[int, str]) -> str:
        return format_units(amount, self.resolve(token).decimals)

    def parse_token(self, token: str, amount: str) -> int:
        return parse_units(amount, self.resolve(token).decimals)
