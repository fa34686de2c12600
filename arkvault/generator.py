import logging
import secrets
import string
from dataclasses import dataclass, replace

from arkvault import config
from arkvault.errors import ConfigurationError

logger = logging.getLogger(__name__)

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

SIMILAR_CHARS = "il1Lo0O"
AMBIGUOUS_CHARS = "{}[]()/\\'\"~,;<>."


@dataclass
class GeneratorOptions:
    length: int = config.PASSWORD_LENGTH
    uppercase: bool = True
    lowercase: bool = True
    numbers: bool = True
    symbols: bool = True
    exclude_similar: bool = False
    exclude_ambiguous: bool = False
    custom_chars: str = ""
    exclude_chars: str = ""


PRESETS = {
    "High Security": GeneratorOptions(length=20, exclude_similar=True),
    "Medium Security": GeneratorOptions(length=16),
    "Basic": GeneratorOptions(length=12, symbols=False),
    "PIN Code": GeneratorOptions(length=6, uppercase=False, lowercase=False, symbols=False),
}


def _drop(chars: str, unwanted: str) -> str:
    return "".join(c for c in chars if c not in unwanted)


def build_charset(options: GeneratorOptions) -> str:
    """Compute the final alphabet: enabled classes, filters, custom additions, then exclusions."""
    charset = ""
    if options.uppercase:
        charset += UPPERCASE
    if options.lowercase:
        charset += LOWERCASE
    if options.numbers:
        charset += DIGITS
    if options.symbols:
        charset += SYMBOLS

    if options.exclude_similar:
        charset = _drop(charset, SIMILAR_CHARS)
    if options.exclude_ambiguous:
        charset = _drop(charset, AMBIGUOUS_CHARS)

    charset += options.custom_chars
    charset = _drop(charset, options.exclude_chars)

    # dict keeps first-seen order
    return "".join(dict.fromkeys(charset))


def generate(options: GeneratorOptions) -> str:
    if not 1 <= options.length <= config.PASSWORD_MAX_LENGTH:
        raise ConfigurationError(
            f"Password length must be between 1 and {config.PASSWORD_MAX_LENGTH}, got {options.length}."
        )

    charset = build_charset(options)
    if not charset:
        raise ConfigurationError("No characters left to build a password from; enable at least one character set.")

    logger.debug("generating %d chars from a %d-symbol alphabet", options.length, len(charset))
    return "".join(secrets.choice(charset) for _ in range(options.length))


def preset(name: str) -> GeneratorOptions:
    try:
        return replace(PRESETS[name])
    except KeyError:
        raise ConfigurationError(f"Unknown preset '{name}'.") from None
