from .errors import error_response, PricingError, PricingErrorCode, ErrorCategory
from .money import round_minor_units, to_decimal
