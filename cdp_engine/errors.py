"""Error taxonomy for the collateralized-debt engine."""


class ProtocolError(Exception):
    """Base error class for protocol errors"""


class InvalidConfiguration(ProtocolError):
    """Construction-time parameter violation"""


class InvalidAmount(ProtocolError):
    """Zero or otherwise nonsensical caller-supplied amount"""


class InsufficientCollateral(ProtocolError):
    """Position lacks the collateral an operation requires"""


class RatioBreach(ProtocolError):
    """Operation would leave a position below the minting ratio"""


class ExcessiveBurn(ProtocolError):
    """Burn amount exceeds recorded debt"""


class LiquidationIneligible(ProtocolError):
    """Position cannot be liquidated (healthy, over the cap, or unbacked)"""


class UnsupportedOperation(ProtocolError):
    """Operation is not available under the configured liquidation policy"""


class ArithmeticOverflow(ProtocolError):
    """Intermediate value exceeds the 256-bit word"""


class InsufficientBalance(ProtocolError):
    """Collaborator balance or allowance too small for a transfer or burn"""


class OracleError(ProtocolError):
    """Price could not be obtained or is invalid"""


class InvalidPrice(OracleError):
    """Non-positive or unusable price reading"""


class FeedUnavailable(OracleError):
    """Price feed could not be read"""
