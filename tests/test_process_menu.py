import json

import pytest

import process_menu
from menu_packager.parsers.llm_parser import PackageSelector

MENU_TEXT = "Garlic Bread - £4\nSoup - £6\nLasagne - £14\nBrownie - £6\n"

PACKAGE_JSON = json.dumps({
    "starters": [{"name": "Garlic Bread", "price": "£4"}, {"name": "Soup", "price": "£6"}],
    "mains": [{"name": "Lasagne", "price": "£14"}],
    "desserts": [{"name": "Brownie", "price": "£6"}],
})


@pytest.fixture
def menu_file(tmp_path):
    path = tmp_path / "menu.txt"
    path.write_text(MENU_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    for name in ("MENU_AI_API_KEY", "OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_DEPLOYMENT_NAME"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / ".env"
    path.write_text("MENU_AI_API_KEY=sk-cli-test-key\n", encoding="utf-8")
    return path


def test_extract_writes_csv(menu_file, env_file, tmp_path, capsys):
    out = tmp_path / "items.csv"

    code = process_menu.main(["--env-file", str(env_file), "extract", str(menu_file), "--csv", str(out)])

    assert code == 0
    assert "Extracted 4 menu items (currency: £)" in capsys.readouterr().out
    assert out.read_text(encoding="utf-8").splitlines() == [
        "name,price", "Garlic Bread,£4", "Soup,£6", "Lasagne,£14", "Brownie,£6",
    ]


def test_package_writes_json(menu_file, env_file, tmp_path, monkeypatch, fake_client):
    client = fake_client(PACKAGE_JSON)
    monkeypatch.setattr(
        process_menu, "PackageSelector", lambda settings: PackageSelector(settings, client=client)
    )
    out = tmp_path / "package.json"

    code = process_menu.main([
        "--env-file", str(env_file), "package", str(menu_file),
        "--audience", "family", "--discount", "20", "--output", str(out),
    ])

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["audienceType"] == "family"
    assert payload["packagePrice"] == "£24"
    assert payload["totalSavings"] == "£6"
    assert [it["name"] for it in payload["mains"]] == ["Lasagne"]


def test_package_reports_bad_discount(menu_file, env_file, monkeypatch, fake_client):
    monkeypatch.setattr(
        process_menu, "PackageSelector", lambda settings: PackageSelector(settings, client=fake_client())
    )

    code = process_menu.main(["--env-file", str(env_file), "package", str(menu_file), "--discount", "150"])

    assert code == 1


def test_missing_file_exits_with_error(env_file, tmp_path):
    code = process_menu.main(["--env-file", str(env_file), "extract", str(tmp_path / "menu.pdf")])

    assert code == 1


def test_check_env_masks_key(env_file, capsys):
    code = process_menu.main(["--env-file", str(env_file), "check-env"])

    out = capsys.readouterr().out
    assert code == 0
    status = json.loads(out)
    assert status["environment"]["api_key"]["masked"] == "sk-...key"
    assert "sk-cli-test-key" not in out


def test_malformed_setting_exits_with_error(env_file, menu_file, monkeypatch):
    monkeypatch.setenv("MENU_AI_MAX_TOKENS", "lots")

    code = process_menu.main(["--env-file", str(env_file), "extract", str(menu_file)])

    assert code == 1
