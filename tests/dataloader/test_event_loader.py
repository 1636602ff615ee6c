from __future__ import annotations

import pyarrow.parquet as pq
import pytest

from lob_impact.dataloader.event_loader import EventTableLoader
from lob_impact.engines.schema import EVENT_SCHEMA
from lob_impact.utils.errors import UserInputError

CSV_TEXT = """event_id,order_id,direction,price,fill_volume,local_timestamp,exchange_timestamp,matching_event,action
1,10,bid,236.50,0.5,2015-05-01T12:00:00.000,2015-05-01T12:00:00.000,2,changed
2,11,ask,236.40,0.5,2015-05-01T12:00:00.010,2015-05-01T12:00:00.001,1,deleted
3,12,ask,237.00,0,2015-05-01T12:00:01.000,2015-05-01T12:00:01.000,,created
"""


def test_load_csv(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")

    events = EventTableLoader().load(path)

    assert events.schema == EVENT_SCHEMA
    assert events.num_rows == 3
    assert events["matching_event"].to_pylist() == [2, 1, None]
    assert events["price"].to_pylist() == [236.50, 236.40, 237.00]


def test_load_parquet(tmp_path, jump_events):
    path = tmp_path / "events.parquet"
    pq.write_table(jump_events, path)

    events = EventTableLoader().load(path)

    assert events.num_rows == jump_events.num_rows
    assert events["event_id"].to_pylist() == jump_events["event_id"].to_pylist()


def test_unsupported_suffix(tmp_path):
    with pytest.raises(UserInputError):
        EventTableLoader().load(tmp_path / "events.json")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        EventTableLoader().load(tmp_path / "2015-05-01.parquet")
