from sqlalchemy import Table, Column, String, BigInteger
from models.base import metadata

# Row identifier contract: ``id`` is the source document's ``id`` parsed as a
# signed 64-bit integer, shared by every row derived from that document.
# Documents whose id is not an integer are stored with id = -1.

attribute_table = Table(
    "attribute",
    metadata,
    Column("content", String),
    Column("attribute_name", String),
    Column("id", BigInteger),
    Column("harmonized_name", String),
    Column("display_name", String),
    Column("unit", String),
)
"""One row per decodable element of a document's Attributes.Attribute array."""

package_table = Table(
    "package",
    metadata,
    Column("content", String),
    Column("display_name", String),
    Column("id", BigInteger),
)
"""At most one row per document, from its Package sub-structure."""

SINK_TABLES = (attribute_table, package_table)
