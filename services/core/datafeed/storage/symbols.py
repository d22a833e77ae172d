import os
import aiosqlite
from dataclasses import dataclass
from typing import Any, Iterable, Optional


CREATE_SQL = """
CREATE TABLE IF NOT EXISTS symbol_infos (
  name TEXT NOT NULL PRIMARY KEY,
  description TEXT NOT NULL DEFAULT '',
  exchange TEXT NOT NULL,
  symbol_type TEXT NOT NULL
);
"""

DEFAULT_MAX_RECORDS = 50


@dataclass
class SymbolRow:
  name: str
  description: str
  exchange: str
  type: str


class SymbolStore:
  """Read-mostly symbol table behind /search and /symbols."""

  def __init__(self, path: str):
    self.path = path

  async def init(self) -> None:
    directory = os.path.dirname(self.path)
    if directory:
      os.makedirs(directory, exist_ok=True)
    async with aiosqlite.connect(self.path) as db:
      await db.execute(CREATE_SQL)
      await db.commit()

  async def upsert_symbols(self, symbols: Iterable[SymbolRow]) -> int:
    rows = list(symbols)
    if not rows:
      return 0
    async with aiosqlite.connect(self.path) as db:
      await db.executemany(
        """
        INSERT INTO symbol_infos (name, description, exchange, symbol_type)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(name) DO UPDATE SET
          description=excluded.description,
          exchange=excluded.exchange,
          symbol_type=excluded.symbol_type;
        """,
        [(r.name, r.description, r.exchange, r.type) for r in rows],
      )
      await db.commit()
    return len(rows)

  async def search(
    self,
    query: str,
    type: Optional[str] = None,
    exchange: Optional[str] = None,
    max_records: Any = DEFAULT_MAX_RECORDS,
  ) -> list[dict[str, Any]]:
    """
    Fuzzy match on name or description.

    Args:
        query: Substring to look for
        type: Symbol type filter; empty means any type
        exchange: Exchange filter; empty means all exchanges
        max_records: Row limit; non-numeric values fall back to 50

    Returns:
        List of {symbol, full_name, description, exchange, type}
    """
    try:
      limit = int(max_records) or DEFAULT_MAX_RECORDS
    except (TypeError, ValueError):
      limit = DEFAULT_MAX_RECORDS

    pattern = f"%{query or ''}%"
    clauses = ["(name LIKE ? OR description LIKE ?)"]
    params: list[Any] = [pattern, pattern]
    if type:
      clauses.append("symbol_type = ?")
      params.append(type)
    if exchange:
      clauses.append("exchange = ?")
      params.append(exchange)
    params.append(limit)

    async with aiosqlite.connect(self.path) as db:
      db.row_factory = aiosqlite.Row
      cur = await db.execute(
        f"""
        SELECT name AS symbol,
               name AS full_name,
               description,
               exchange,
               symbol_type AS type
        FROM symbol_infos
        WHERE {" AND ".join(clauses)}
        LIMIT ?;
        """,
        params,
      )
      rows = await cur.fetchall()
      return [dict(r) for r in rows]

  async def lookup_exact(self, name: str) -> Optional[dict[str, Any]]:
    async with aiosqlite.connect(self.path) as db:
      db.row_factory = aiosqlite.Row
      cur = await db.execute(
        """
        SELECT name, description, exchange, symbol_type AS type
        FROM symbol_infos
        WHERE name = ?
        LIMIT 1;
        """,
        (name,),
      )
      row = await cur.fetchone()
      return dict(row) if row else None
