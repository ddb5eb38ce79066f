import json
import logging

import pytest

from content_locator.analyzers.store import (
    AcfJsonRegistry, Document, FieldDef, FieldGroup, RawDataStore,
)


@pytest.fixture
def post_a():
    return Document(id=5, title="Post A", type="post", status="publish",
                    body="<!-- wp:paragraph --> hello <!-- wp:paragraph -->")


@pytest.fixture
def page_b():
    return Document(
        id=7, title="Page B", type="page", status="draft",
        body=(
            '<!-- wp:acf/hero {"name":"acf/hero"} /-->'
            '<!-- wp:block {"ref":9} /-->'
            '<!-- wp:my-plugin/card -->[gallery ids="1,2"]<!-- /wp:my-plugin/card -->'
            '<!-- wp:paragraph -->'
        ),
    )


@pytest.fixture
def options_group():
    return FieldGroup(key="group_1", title="Page Options", fields=[
        FieldDef(name="show_banner", label="Show Banner", kind="true_false", group_title="Page Options"),
        FieldDef(name="features", label="Features", kind="checkbox", group_title="Page Options"),
        FieldDef(name="subtitle", label="Subtitle", kind="text", group_title="Page Options"),
    ])


@pytest.fixture
def store(post_a, page_b):
    attachment = Document(id=20, title="Image", type="attachment", status="inherit",
                          body="<!-- wp:image --> [caption]")
    trashed = Document(id=21, title="Old", type="post", status="trash",
                       body="<!-- wp:quote -->")
    plain = Document(id=22, title="Plain", type="page", status="publish",
                     body="No markup here at all.")
    return RawDataStore(
        documents=[post_a, page_b, attachment, trashed, plain],
        block_titles={9: "My Pattern"},
        meta_rows=[
            (5, "show_banner", "1"),
            (7, "show_banner", "0"),
            (7, "features", 'a:2:{i:0;s:3:"yes";i:1;s:2:"no";}'),
            (20, "features", 'a:2:{i:0;s:3:"yes";i:1;s:2:"no";}'),
            (5, "subtitle", "1"),
        ],
    )


@pytest.fixture
def registry(options_group):
    return AcfJsonRegistry([options_group])


@pytest.fixture
def raw_dir(tmp_path):
    """A raw extraction directory as content-extract would leave it."""
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "posts.json").write_text(json.dumps([
        {"id": 5, "title": "Post A", "type": "post", "status": "publish",
         "content": "<!-- wp:paragraph --> hello <!-- wp:paragraph -->"},
        {"id": 7, "title": "Page B", "type": "page", "status": "publish",
         "content": '<!-- wp:block {"ref":9} /--> [contact-form id="3"]'},
    ]), encoding="utf-8")
    (raw / "blocks.json").write_text(json.dumps([{"id": 9, "title": "My Pattern"}]), encoding="utf-8")
    (raw / "postmeta.json").write_text(json.dumps([
        {"post_id": 7, "meta_key": "features", "meta_value": ["yes", "no"]},
    ]), encoding="utf-8")
    groups = raw / "field_groups"
    groups.mkdir()
    (groups / "group_1.json").write_text(json.dumps({
        "key": "group_1",
        "title": "Page Options",
        "fields": [
            {"key": "field_1", "label": "Features", "name": "features", "type": "checkbox"},
        ],
    }), encoding="utf-8")
    return raw


@pytest.fixture
def restore_root_logger():
    """setup_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
