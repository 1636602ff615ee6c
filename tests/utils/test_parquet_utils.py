import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from lob_impact.utils.filesystem import FileSystem
from lob_impact.utils.parquet_utils import ParquetAtomicWriter


def test_ensure_dir_creates_nested(tmp_path):
    target = tmp_path / "a" / "b"

    assert FileSystem.ensure_dir(target) == target
    assert target.is_dir()


def test_remove_file_and_dir(tmp_path):
    f = tmp_path / "x.txt"
    f.write_text("1")
    d = tmp_path / "d"
    (d / "sub").mkdir(parents=True)

    FileSystem.remove(f)
    FileSystem.remove(d)
    FileSystem.remove(tmp_path / "missing")

    assert not f.exists()
    assert not d.exists()


def test_atomic_write(tmp_path):
    out = tmp_path / "fact" / "trades.parquet"
    table = pa.table({"price": [1.0, 2.0]})

    assert ParquetAtomicWriter.write_table(table, out) == out
    assert pq.read_table(out).equals(table)
    assert not (tmp_path / "fact" / "trades.parquet.tmp").exists()


def test_atomic_write_failure_leaves_nothing(tmp_path):
    out = tmp_path / "trades.parquet"

    with pytest.raises(Exception):
        ParquetAtomicWriter.write_table(pa.table({"a": [1]}), out, compression="no-such-codec")

    assert not out.exists()
    assert not (tmp_path / "trades.parquet.tmp").exists()
