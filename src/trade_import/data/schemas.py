"""
Data schemas for trade file validation.

Defines expected columns and data types for saved trade files.
"""

from dataclasses import dataclass


@dataclass
class ColumnSchema:
    """Schema definition for a single column."""
    name: str
    dtype: str  # pandas dtype string
    required: bool = True
    nullable: bool = False


@dataclass
class FileSchema:
    """Schema definition for a file."""
    name: str
    columns: list[ColumnSchema]
    description: str

    @property
    def required_columns(self) -> list[str]:
        """Get list of required column names."""
        return [c.name for c in self.columns if c.required]

    @property
    def all_columns(self) -> list[str]:
        """Get list of all column names."""
        return [c.name for c in self.columns]

    def validate_columns(self, df_columns: list[str]) -> tuple[bool, list[str]]:
        """
        Validate that a dataframe has the required columns.

        Args:
            df_columns: List of column names from the dataframe

        Returns:
            Tuple of (is_valid, list of missing columns)
        """
        missing = [col for col in self.required_columns if col not in df_columns]
        return len(missing) == 0, missing


# Canonical trade records (input/output). Quantities and prices are stored
# as decimal strings so that precision survives a save/load round trip.
TRADES_SCHEMA = FileSchema(
    name="trades",
    description="Canonical buy/sell trade records",
    columns=[
        ColumnSchema(name="trade_id", dtype="str", required=True),
        ColumnSchema(name="symbol", dtype="str", required=True),
        ColumnSchema(name="asset_type", dtype="str", required=False),
        ColumnSchema(name="side", dtype="str", required=True),
        ColumnSchema(name="quantity", dtype="str", required=True),
        ColumnSchema(name="price", dtype="str", required=True),
        ColumnSchema(name="fee", dtype="str", required=False),
        ColumnSchema(name="date", dtype="datetime64[ns]", required=True),
        ColumnSchema(name="source", dtype="str", required=False),
        ColumnSchema(name="currency", dtype="str", required=False, nullable=True),
    ],
)
