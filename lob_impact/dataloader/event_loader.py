# lob_impact/dataloader/event_loader.py
from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.csv as csv
import pyarrow.parquet as pq

from lob_impact.engines.schema import EVENT_SCHEMA, conform_events
from lob_impact.utils.errors import UserInputError
from lob_impact.utils.logger import logs


class EventTableLoader:
    """
    已匹配事件文件 → EVENT_SCHEMA Arrow Table

    支持：
      - *.parquet
      - *.csv（表头必须包含 EVENT_SCHEMA 全部列名，matching_event 空值为缺失）
    """

    SUFFIXES = (".parquet", ".csv")

    def load(self, path: str | Path) -> pa.Table:
        path = Path(path)

        if path.suffix not in self.SUFFIXES:
            raise UserInputError(
                f"unsupported event file {path.name}, expected one of {self.SUFFIXES}"
            )
        if not path.exists():
            raise FileNotFoundError(f"event file not found: {path}")

        if path.suffix == ".parquet":
            table = pq.read_table(path)
        else:
            table = self._read_csv(path)

        events = conform_events(table)
        logs.info(f"[EventLoader] loaded {path.name} rows={events.num_rows}")
        return events

    @staticmethod
    def _read_csv(path: Path) -> pa.Table:
        return csv.read_csv(
            path,
            convert_options=csv.ConvertOptions(
                column_types={f.name: f.type for f in EVENT_SCHEMA},
                null_values=["", "NA", "null"],
                strings_can_be_null=True,
                timestamp_parsers=[csv.ISO8601],
            ),
        )
