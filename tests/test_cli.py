"""Tests for the assetledger CLI."""

import json
from pathlib import Path

import pytest

from assetledger.cli import main


def run(db: Path, *argv: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(["--db", str(db), *argv])
    return exc_info.value.code


FIELDS = [
    "--msisdn", "+91 456787",
    "--pin", "0120",
    "--balance", "300",
    "--status", "SUCCESS",
    "--trans-amount", "500",
    "--trans-type", "ONLINE",
    "--remarks", "NO",
]


@pytest.fixture
def db(tmp_path, monkeypatch):
    # keep any assetledger.toml in the real cwd out of the way
    monkeypatch.chdir(tmp_path)
    return tmp_path / "ledger.sqlite"


def test_init_and_read(db, capsys):
    """init seeds the genesis set; read prints the stored payload."""
    assert run(db, "init") == 0
    assert "Seeded 6 asset(s)" in capsys.readouterr().out

    assert run(db, "read", "1203") == 0
    out = capsys.readouterr().out.strip()
    assert out == (
        '{"BALANCE":300,"DEALERID":1203,"ID":"0120","MSISDN":"+91 456787",'
        '"REMARKS":"NO","Status":"SUCCESS","TRANS":"ONLINE","TRANSAM":500}'
    )


def test_read_missing(db, capsys):
    """Unknown dealers exit 1 with an error on stderr."""
    assert run(db, "read", "42") == 1
    err = capsys.readouterr().err
    assert err.startswith("Error:")
    assert "does not exist" in err


def test_create_update_history(db, capsys):
    assert run(db, "-q", "create", "7", *FIELDS) == 0
    updated = [*FIELDS]
    updated[updated.index("--balance") + 1] = "350"
    assert run(db, "-q", "update", "7", *updated) == 0
    capsys.readouterr()

    assert run(db, "history", "7") == 0
    versions = json.loads(capsys.readouterr().out)
    assert [v["BALANCE"] for v in versions] == [350, 300]
    assert all(v["DEALERID"] == 7 for v in versions)


def test_update_missing(db, capsys):
    assert run(db, "update", "8", *FIELDS) == 1
    assert "does not exist" in capsys.readouterr().err


def test_list_and_exists(db, capsys):
    run(db, "-q", "init")
    capsys.readouterr()

    assert run(db, "list") == 0
    assets = json.loads(capsys.readouterr().out)
    assert [a["DEALERID"] for a in assets] == [1201, 1202, 1203, 1204, 1205, 1206]

    run(db, "exists", "1201")
    assert capsys.readouterr().out.strip() == "true"
    run(db, "exists", "99")
    assert capsys.readouterr().out.strip() == "false"


def test_init_from_genesis_file(db, tmp_path, capsys):
    """A genesis file named in the config replaces the built-in set."""
    genesis = tmp_path / "genesis.yaml"
    genesis.write_text("""
- dealer_id: 5
  msisdn: "+91 5"
  pin: "5555"
  balance: 5
  status: SUCCESS
  trans_amount: 5
  trans_type: ONLINE
  remarks: "YES"
""")
    config = tmp_path / "assetledger.toml"
    config.write_text(f'[genesis]\nfile = "{genesis.as_posix()}"\n')

    assert run(db, "--config", str(config), "init") == 0
    capsys.readouterr()
    run(db, "list")
    assets = json.loads(capsys.readouterr().out)
    assert [a["DEALERID"] for a in assets] == [5]


def test_version_flag(capsys):
    """--version prints package and interpreter versions."""
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    out = capsys.readouterr().out
    assert "assetledger" in out
    assert "python" in out
    assert "platform" in out


def test_list_elements_match_stored_payload(db, capsys):
    """Each listed record is printed in the same canonical form as read."""
    run(db, "-q", "init")
    capsys.readouterr()

    run(db, "read", "1201")
    payload = capsys.readouterr().out.strip()

    run(db, "list")
    out = capsys.readouterr().out.strip()
    assert out.startswith("[" + payload + ",")

    run(db, "history", "1201")
    assert capsys.readouterr().out.strip() == "[" + payload + "]"
