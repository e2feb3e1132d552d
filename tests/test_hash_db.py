# tests/test_hash_db.py
from sudoku_hash_db import load_global_hashes, save_global_hashes

H1 = "a" * 64
H2 = "0123456789abcdef" * 4


def test_missing_file_is_empty(tmp_path):
    assert load_global_hashes(str(tmp_path / "absent.txt")) == set()


def test_save_then_load(tmp_path):
    path = tmp_path / "sub" / "hashes.txt"
    save_global_hashes({H1, H2}, str(path))
    assert path.read_text(encoding="utf-8") == f"{H2}\n{H1}\n"
    assert load_global_hashes(str(path)) == {H1, H2}


def test_invalid_lines_skipped(tmp_path):
    path = tmp_path / "hashes.txt"
    path.write_text(f"{H1}\n\nnot-a-hash\n{H2.upper()}\n", encoding="utf-8")
    assert load_global_hashes(str(path)) == {H1, H2}
