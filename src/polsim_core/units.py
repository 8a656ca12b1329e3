# --- src/polsim_core/units.py ---
import logging
import math
import tokenize

import pint

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")

# Default units of the simulation's working quantities.
FREQUENCY_UNIT = "GHz"
FIELD_UNIT = "tesla"
TEMPERATURE_UNIT = "kelvin"
TIME_UNIT = "second"
FRACTION_UNIT = "dimensionless"


def to_magnitude(text: str, unit: str) -> float:
    """
    Converts a scenario or configuration token into a float in `unit`.

    A bare number is taken to already be in `unit`; anything else is parsed as a
    pint quantity (e.g. '140145MHz', '30min', '95 percent') and converted.

    Raises:
        ValueError: If the text is not a number or quantity, carries an
                    incompatible dimension, or is not finite.
    """
    text = str(text).strip()
    try:
        value = float(text)
    except ValueError:
        # pint evaluates the text as an expression, so malformed input surfaces
        # as tokenizer and arithmetic errors as well as pint errors.
        try:
            value = float(Quantity(text).to(unit).magnitude)
        except (pint.errors.DimensionalityError, pint.errors.UndefinedUnitError) as e:
            raise ValueError(f"'{text}' cannot be expressed in {unit}: {e}") from e
        except (
            pint.errors.PintError, AttributeError, TypeError, ValueError, SyntaxError,
            AssertionError, tokenize.TokenError, ZeroDivisionError, OverflowError,
        ) as e:
            raise ValueError(f"'{text}' is not a valid quantity: {e}") from e
    if not math.isfinite(value):
        raise ValueError(f"'{text}' is not a finite value.")
    return value
