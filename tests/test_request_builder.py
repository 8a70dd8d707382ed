import base64

import pytest

from medreport.app.errors import InvalidInputError
from medreport.app.models.analysis import AnalysisRequest
from medreport.app.models.report import Language
from medreport.app.services.request_builder import RequestBuilder
from medreport.app.services.schema_contract import prompt_for, schema_for
from medreport.utils.config import ModelConfig

from conftest import PNG_BYTES


@pytest.mark.parametrize("language", [Language.EN, Language.AR])
@pytest.mark.parametrize("mime_type", ["image/png", "image/jpeg", "image/webp"])
def test_build_pairs_image_with_localized_prompt(language, mime_type):
    request = AnalysisRequest(image_bytes=PNG_BYTES, mime_type=mime_type, language=language)

    built = RequestBuilder().build(request)

    assert built.prompt == prompt_for(language)
    assert built.response_schema == schema_for()
    assert built.temperature == ModelConfig.TEMPERATURE
    assert built.language is language
    assert base64.b64decode(built.image_base64) == PNG_BYTES


def test_payload_matches_generate_content_shape(png_request):
    payload = RequestBuilder().build(png_request).to_payload()

    parts = payload["contents"][0]["parts"]
    assert parts[0]["inline_data"]["mime_type"] == "image/png"
    assert parts[1]["text"] == prompt_for(Language.EN)
    config = payload["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["temperature"] == 0.2
    assert config["responseSchema"]["type"] == "OBJECT"


@pytest.mark.parametrize("mime_type", ["application/pdf", "text/plain", "", "IMAGE/PNG", "video/mp4"])
def test_build_rejects_non_image_types(mime_type):
    request = AnalysisRequest(image_bytes=PNG_BYTES, mime_type=mime_type)

    with pytest.raises(InvalidInputError):
        RequestBuilder().build(request)


def test_empty_image_is_still_built():
    request = AnalysisRequest(image_bytes=b"", mime_type="image/png")

    built = RequestBuilder().build(request)

    assert built.image_base64 == ""
