from .holding import HoldingRow
