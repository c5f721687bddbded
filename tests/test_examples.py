import pytest

from landkit import examples
from landkit.meta import DEFAULT_FILE, Data

SOURCE = "export default { fetch() { return new Response('hi'); } };\n"


@pytest.fixture
def assets(tmp_path):
    root = tmp_path / "assets"
    (root / "js-hello" / "src").mkdir(parents=True)
    meta = Data.new_js()
    meta.name = "js-hello"
    meta.to_file(root / "js-hello" / DEFAULT_FILE)
    (root / "js-hello" / "src" / "index.js").write_text(SOURCE)
    (root / "other").mkdir()
    (root / "other" / "file.txt").write_text("ignored")
    return root


def test_defaults_contents():
    items = examples.defaults()
    assert [item.link for item in items] == ["js-hello"]
    assert items[0].asset_content == "js-hello/src/index.js"
    assert items[0].lang == "javascript"


def test_get_found_and_missing():
    assert examples.get("js-hello").title == "Hello World - JavaScript"
    assert examples.get("nope") is None


def test_display():
    item = examples.get("js-hello")
    assert str(item) == (
        "Hello World - JavaScript (a simple hello world example by http "
        "trigger and return hello world string)"
    )


def test_get_source(assets):
    assert examples.get("js-hello").get_source(assets) == SOURCE


def test_get_source_missing(tmp_path):
    assert examples.get("js-hello").get_source(tmp_path) is None


def test_extract_with_description(assets, tmp_path):
    target = str(tmp_path / "proj")
    examples.get("js-hello").extract(assets, target, "my project")
    assert (tmp_path / "proj" / "src" / "index.js").read_text() == SOURCE
    assert not (tmp_path / "proj" / "file.txt").exists()
    data = Data.from_file(tmp_path / "proj" / DEFAULT_FILE)
    assert data.name == target
    assert data.description == "my project"
    assert data.build.main == "src/index.js"


def test_extract_empty_description_uses_template(assets, tmp_path):
    target = str(tmp_path / "proj2")
    item = examples.get("js-hello")
    item.extract(assets, target, "")
    data = Data.from_file(tmp_path / "proj2" / DEFAULT_FILE)
    assert data.description == item.description


def test_extract_without_meta_fails(tmp_path):
    (tmp_path / "js-hello").mkdir()
    with pytest.raises(FileNotFoundError):
        examples.get("js-hello").extract(tmp_path, str(tmp_path / "out"), "")