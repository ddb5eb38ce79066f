import json
from unittest import mock

import pytest
import requests

from content_locator.analyzers.main import run_analysis
from content_locator.api.wordpress_client import WordPressAPIError, WordPressClient
from content_locator.extractors.blocks import BlocksExtractor
from content_locator.extractors.field_groups import FieldGroupsExtractor
from content_locator.extractors.main import ConfigError, load_site_config, main, run_extraction
from content_locator.extractors.posts import EXTRACT_STATUSES, PostsExtractor, rendered_or_raw, to_stored_value

POST_ITEM = {
    "id": 5,
    "type": "post",
    "status": "publish",
    "title": {"raw": "Post A", "rendered": "Post&nbsp;A"},
    "content": {"raw": "<!-- wp:paragraph -->", "rendered": "<p></p>"},
    "acf": {"show_banner": True, "features": ["yes"], "subtitle": "Hi", "empty": None},
}

PAGE_ITEM = {
    "id": 7,
    "type": "page",
    "status": "draft",
    "title": {"raw": "Page B"},
    "content": {"raw": "[gallery]"},
    "acf": [],
}


def fake_client(collections):
    client = mock.Mock(spec=WordPressClient)

    def iter_collection(endpoint, params=None, per_page=100):
        result = collections[endpoint]
        if isinstance(result, Exception):
            raise result
        yield from result

    client.iter_collection.side_effect = iter_collection
    return client


def paged_client(*responses):
    session = mock.Mock(spec=requests.Session)
    session.headers = {}
    session.get.side_effect = list(responses)
    return WordPressClient("https://acme.test", "admin", "pw", session=session)


def page_response(status_code, payload, total_pages=2):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status_code
    response.headers = {"X-WP-TotalPages": str(total_pages)}
    response.text = ""
    response.json.return_value = payload
    return response


def test_rendered_or_raw():
    assert rendered_or_raw({"raw": "", "rendered": "x"}) == ""
    assert rendered_or_raw({"rendered": "x"}) == "x"
    assert rendered_or_raw("plain") == "plain"
    assert rendered_or_raw(None) == ""


@pytest.mark.parametrize("value, stored", [
    (True, "1"),
    (False, "0"),
    (["yes", "no"], ["yes", "no"]),
    ("yes", "yes"),
    (3, "3"),
])
def test_to_stored_value(value, stored):
    assert to_stored_value(value) == stored


def test_posts_extractor_writes_posts_and_meta(tmp_path):
    client = fake_client({"posts": [POST_ITEM], "pages": [PAGE_ITEM]})
    result = PostsExtractor(client, tmp_path, "acme").run()

    assert result["status"] == "success"
    posts = json.loads((tmp_path / "posts.json").read_text(encoding="utf-8"))
    assert posts == [
        {"id": 5, "title": "Post A", "type": "post", "status": "publish", "content": "<!-- wp:paragraph -->"},
        {"id": 7, "title": "Page B", "type": "page", "status": "draft", "content": "[gallery]"},
    ]
    meta = json.loads((tmp_path / "postmeta.json").read_text(encoding="utf-8"))
    assert meta == [
        {"post_id": 5, "meta_key": "show_banner", "meta_value": "1"},
        {"post_id": 5, "meta_key": "features", "meta_value": ["yes"]},
        {"post_id": 5, "meta_key": "subtitle", "meta_value": "Hi"},
    ]
    params = client.iter_collection.call_args_list[0].kwargs["params"]
    assert params["context"] == "edit"
    assert "trash" in params["status"].split(",")


def test_posts_extractor_keeps_partial_data_on_failure(tmp_path):
    client = fake_client({"posts": [POST_ITEM], "pages": WordPressAPIError("forbidden", 403)})
    result = PostsExtractor(client, tmp_path, "acme").run()

    assert result["status"] == "partial"
    assert result["posts"] == 1
    assert (tmp_path / "FAILED_POSTS.txt").exists()


def test_posts_extractor_keeps_pages_fetched_before_a_failure(tmp_path):
    client = paged_client(
        page_response(200, [POST_ITEM]),
        page_response(500, {"message": "server error"}),
        page_response(200, [PAGE_ITEM], total_pages=1),
    )
    result = PostsExtractor(client, tmp_path, "acme").run()

    assert result["status"] == "partial"
    assert result["posts"] == 2
    posts = json.loads((tmp_path / "posts.json").read_text(encoding="utf-8"))
    assert [p["id"] for p in posts] == [5, 7]
    assert "500" in (tmp_path / "FAILED_POSTS.txt").read_text(encoding="utf-8")


def test_posts_extractor_survives_non_json_page(tmp_path):
    html_page = page_response(200, None, total_pages=1)
    html_page.json.side_effect = ValueError("<html>")
    client = paged_client(html_page, page_response(200, [PAGE_ITEM], total_pages=1))

    result = PostsExtractor(client, tmp_path, "acme").run()

    assert result["status"] == "partial"
    assert result["posts"] == 1
    assert (tmp_path / "posts.json").exists()


def test_trashed_page_reaches_field_values_only(tmp_path):
    assert "trash" in EXTRACT_STATUSES.split(",")
    trashed = {
        "id": 11,
        "type": "page",
        "status": "trash",
        "title": {"raw": "Old Page"},
        "content": {"raw": "<!-- wp:quote -->"},
        "acf": {"show_banner": True},
    }
    raw = tmp_path / "raw"
    client = fake_client({"posts": [POST_ITEM], "pages": [trashed]})
    PostsExtractor(client, raw, "acme").run()

    groups = raw / "field_groups"
    groups.mkdir()
    (groups / "group_1.json").write_text(json.dumps({
        "key": "group_1",
        "title": "Page Options",
        "fields": [{"key": "field_1", "label": "Show Banner", "name": "show_banner", "type": "true_false"}],
    }), encoding="utf-8")

    report = run_analysis(raw, tmp_path / "out")

    banner = report.field_values["Show Banner (Page Options)"]
    assert [(e.id, e.status) for e in banner.entries] == [(5, "publish"), (11, "trash")]
    assert "quote" not in report.native_blocks


def test_blocks_extractor(tmp_path):
    client = fake_client({"blocks": [{"id": 9, "title": {"raw": "My Pattern"}}, {"title": "no id"}]})
    result = BlocksExtractor(client, tmp_path, "acme").run()

    assert result["blocks"] == 1
    assert json.loads((tmp_path / "blocks.json").read_text(encoding="utf-8")) == [
        {"id": 9, "title": "My Pattern"}]


def test_blocks_extractor_failure(tmp_path):
    client = fake_client({"blocks": WordPressAPIError("nope")})
    result = BlocksExtractor(client, tmp_path, "acme").run()
    assert result["status"] == "error"
    assert not (tmp_path / "blocks.json").exists()


def test_blocks_extractor_keeps_first_page_on_later_failure(tmp_path):
    client = paged_client(
        page_response(200, [{"id": 9, "title": {"raw": "My Pattern"}}]),
        page_response(503, {"message": "unavailable"}),
    )
    result = BlocksExtractor(client, tmp_path, "acme").run()

    assert result["status"] == "partial"
    assert json.loads((tmp_path / "blocks.json").read_text(encoding="utf-8")) == [
        {"id": 9, "title": "My Pattern"}]
    assert (tmp_path / "FAILED_BLOCKS.txt").exists()


def test_field_groups_extractor_copies_local_json(tmp_path):
    acf_json = tmp_path / "acf-json"
    acf_json.mkdir()
    (acf_json / "group_1.json").write_text(json.dumps({"key": "group_1", "title": "Opts", "fields": []}),
                                           encoding="utf-8")
    (acf_json / "bad.json").write_text("{", encoding="utf-8")
    raw = tmp_path / "raw"

    result = FieldGroupsExtractor(None, raw, "acme", acf_json_dir=acf_json).run()

    assert result["field_groups"] == 1
    assert (raw / "field_groups" / "group_1.json").exists()
    assert result["failed"][0]["name"] == "bad.json"


def test_field_groups_extractor_without_acf(tmp_path):
    result = FieldGroupsExtractor(None, tmp_path, "acme", acf_json_dir=None).run()
    assert result["status"] == "no_data"


def write_config(config_dir, site, text):
    config_dir.mkdir(exist_ok=True)
    (config_dir / f"{site}.yaml").write_text(text, encoding="utf-8")


def test_load_site_config(tmp_path):
    write_config(tmp_path, "acme", "wordpress:\n  url: https://acme.test\n  username: admin\n")
    config = load_site_config("acme", tmp_path)
    assert config["wordpress"]["username"] == "admin"


@pytest.mark.parametrize("text", [
    "",
    "wordpress: nope\n",
    "wordpress:\n  url: acme.test\n",
])
def test_invalid_config(tmp_path, text):
    write_config(tmp_path, "acme", text)
    with pytest.raises(ConfigError):
        load_site_config("acme", tmp_path)


def test_missing_config(tmp_path):
    with pytest.raises(ConfigError):
        load_site_config("ghost", tmp_path)


def test_run_extraction_with_client(tmp_path, restore_root_logger):
    config_dir = tmp_path / "config"
    write_config(config_dir, "acme", "wordpress:\n  url: https://acme.test\n")
    client = fake_client({"posts": [POST_ITEM], "pages": [], "blocks": []})

    results = run_extraction("acme", ["posts", "blocks", "field_groups", "bogus"],
                             config_dir=config_dir, base_data_dir=tmp_path / "data", client=client)

    assert set(results) == {"posts", "blocks", "field_groups"}
    assert results["posts"]["status"] == "success"
    assert results["field_groups"]["status"] == "no_data"
    assert (tmp_path / "data" / "acme" / "raw" / "posts.json").exists()


def test_cli_exits_on_config_error(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main(["--site", "ghost", "--extract-all", "--config-dir", str(tmp_path)])
    assert exc_info.value.code == 1


def test_cli_lists_sites(tmp_path, capsys):
    write_config(tmp_path / "config", "acme", "wordpress:\n  url: https://acme.test\n")
    (tmp_path / "data" / "blog").mkdir(parents=True)

    with pytest.raises(SystemExit):
        main(["--list-sites", "--config-dir", str(tmp_path / "config"), "--data-dir", str(tmp_path / "data")])

    out = capsys.readouterr().out
    assert "- acme" in out
    assert "- blog" in out
