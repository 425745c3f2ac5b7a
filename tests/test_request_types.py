import dataclasses

import pytest

from conftest import Post
from core.exceptions import KeypathError
from core.headers import HeaderBuilder
from core.request_types import (
    DEFAULT_ACCEPTED_STATUS_CODES,
    Failure,
    JsonRequest,
    Success,
)


def test_from_url_defaults():
    request = JsonRequest.from_url("http://example.test")

    assert request.method == "GET"
    assert dict(request.headers) == {"Content-Type": "application/json"}
    assert request.body is None


def test_caller_content_type_is_kept():
    request = JsonRequest("http://example.test", headers={"content-type": "text/plain"})

    assert dict(request.headers) == {"content-type": "text/plain"}


def test_method_is_normalized():
    assert JsonRequest("http://example.test", method="post").method == "POST"


def test_request_is_immutable():
    request = JsonRequest.from_url("http://example.test")

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.url = "http://other.test"
    with pytest.raises(TypeError):
        request.headers["X-Extra"] = "1"


def test_with_json_encodes_models_and_plain_values():
    from_model = JsonRequest.with_json("http://example.test", Post(userId=89))
    from_dict = JsonRequest.with_json("http://example.test", {"userId": 89}, method="PUT")

    assert from_model.method == "POST"
    assert from_model.body == b'{"userId":89}'
    assert from_dict.method == "PUT"
    assert from_dict.body == b'{"userId": 89}'
    assert from_dict.headers["Content-Type"] == "application/json"


def test_header_builder_merges_defaults():
    builder = HeaderBuilder({"User-Agent": "json-fetch", "Accept": "*/*"})

    headers = builder.build_json_headers({"accept": "application/json"})

    assert headers == {
        "Content-Type": "application/json",
        "User-Agent": "json-fetch",
        "accept": "application/json",
    }


def test_default_accepted_codes():
    assert 200 in DEFAULT_ACCEPTED_STATUS_CODES
    assert 299 in DEFAULT_ACCEPTED_STATUS_CODES
    assert 300 not in DEFAULT_ACCEPTED_STATUS_CODES
    assert 199 not in DEFAULT_ACCEPTED_STATUS_CODES


def test_result_variants():
    success = Success(Post(userId=1))
    failure = Failure(KeypathError("a"))

    assert success.ok and not failure.ok
    assert success.unwrap() == Post(userId=1)
    with pytest.raises(KeypathError):
        failure.unwrap()


def test_results_support_match():
    def describe(result):
        match result:
            case Success(value=value):
                return f"ok {value}"
            case Failure(error=KeypathError(keypath=keypath)):
                return f"missing {keypath}"
            case Failure(error=error):
                return f"failed {error}"

    assert describe(Success(1)) == "ok 1"
    assert describe(Failure(KeypathError("a.b"))) == "missing a.b"
