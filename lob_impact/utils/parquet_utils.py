# lob_impact/utils/parquet_utils.py
from pathlib import Path
import os

import pyarrow as pa
import pyarrow.parquet as pq

from lob_impact.utils.filesystem import FileSystem


class ParquetAtomicWriter:
    """
    Parquet 原子写工具

    语义：
      - 永远写到 *.tmp
      - 成功后 rename → 正式 parquet
      - 失败时清理 *.tmp，不留下半个文件
    """

    @staticmethod
    def write_table(table: pa.Table, output_path: Path, **kwargs) -> Path:
        output_path = Path(output_path)
        FileSystem.ensure_dir(output_path.parent)

        tmp_path = output_path.with_suffix(output_path.suffix + ".tmp")

        try:
            pq.write_table(table, tmp_path, **kwargs)
            with open(tmp_path, "rb") as f:
                os.fsync(f.fileno())
        except Exception:
            FileSystem.remove(tmp_path)
            raise

        tmp_path.replace(output_path)
        return output_path
