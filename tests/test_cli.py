import json

from zktransfer.cli import build_parser, cmd_witness, main, prompt_amount


def test_witness_command_writes_record(tmp_path, capsys):
    out = tmp_path / "input.json"
    rc = main(["witness", "--amount", "150", "--out", str(out)])
    assert rc == 0

    inputs = json.loads(out.read_text(encoding="utf-8"))
    assert inputs["amount"] == "150"
    assert inputs["sender_balance"] == "500"
    assert inputs["enabled"] == "1"

    printed = capsys.readouterr().out
    assert "Signature verified: True" in printed
    assert "new root hash" in printed

    assert main(["check", str(out)]) == 0


def test_amount_is_prompted_for(tmp_path, capsys):
    out = tmp_path / "input.json"
    prompts = []

    def read(prompt):
        prompts.append(prompt)
        return "25\n"

    args = build_parser().parse_args(["witness", "--out", str(out)])
    assert cmd_witness(args, read) == 0
    assert prompts == ["Amount of money to transfer:"]
    assert json.loads(out.read_text(encoding="utf-8"))["amount"] == "25"


def test_prompt_amount():
    assert prompt_amount(lambda _: "42") == 42


def test_overdraft_writes_nothing(tmp_path, capsys):
    out = tmp_path / "input.json"
    assert main(["witness", "--amount", "501", "--out", str(out)]) == 1
    assert not out.exists()
    assert "insufficient balance" in capsys.readouterr().err


def test_malformed_amount_writes_nothing(tmp_path, capsys):
    out = tmp_path / "input.json"
    assert main(["witness", "--amount", "ten", "--out", str(out)]) == 1
    assert not out.exists()


def test_check_rejects_tampered_record(tmp_path, capsys):
    out = tmp_path / "input.json"
    assert main(["witness", "--amount", "10", "--out", str(out)]) == 0
    inputs = json.loads(out.read_text(encoding="utf-8"))
    inputs["accounts_root"] = "1"
    out.write_text(json.dumps(inputs), encoding="utf-8")

    assert main(["check", str(out)]) == 1
    assert "accounts_root" in capsys.readouterr().err


def test_keys_command(capsys):
    assert main(["keys"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Sender private key: " + "00" * 31 + "01"
    assert lines[1].startswith("Sender public key: [")
    assert lines[3].startswith("Receiver public key: [")
    assert lines[1].split(": ", 1)[1] != lines[3].split(": ", 1)[1]


def test_check_reports_unreadable_files(tmp_path, capsys):
    bad = tmp_path / "input.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["check", str(bad)]) == 1
    assert main(["check", str(tmp_path / "missing.json")]) == 1

    bad.write_text("[1, 2]", encoding="utf-8")
    assert main(["check", str(bad)]) == 1
    assert "error:" in capsys.readouterr().err
