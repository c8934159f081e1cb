import pytest

from s3loader.core.errors import InvalidNameError
from s3loader.models import FetchRequest
from s3loader.translate import (
    CustomTranslator,
    FixedBucketTranslator,
    NameTranslator,
    artifact_name_to_key,
    validate_artifact_name,
)


def test_dotted_name_maps_to_class_key():
    request = FixedBucketTranslator("code-bucket").translate("com.example.Foo")
    assert request.bucket == "code-bucket"
    assert request.key == "com/example/Foo.class"
    assert request.requester_pays is False


def test_translate_is_deterministic():
    translator = FixedBucketTranslator("code-bucket", requester_pays=True)
    first = translator.translate("org.acme.Thing$Inner")
    second = translator.translate("org.acme.Thing$Inner")
    assert first == second
    assert (first.bucket, first.key, first.requester_pays) == (second.bucket, second.key, second.requester_pays)


def test_requester_pays_is_carried_into_request():
    request = FixedBucketTranslator("paid", requester_pays=True).translate("a.B")
    assert request.requester_pays is True
    assert request.to_get_object_kwargs() == {"Bucket": "paid", "Key": "a/B.class", "RequestPayer": "requester"}


def test_custom_suffix():
    assert artifact_name_to_key("pkg.mod", suffix=".pyc") == "pkg/mod.pyc"
    assert FixedBucketTranslator("b", suffix=".py").translate("pkg.mod").key == "pkg/mod.py"


def test_resource_name_used_verbatim():
    request = FixedBucketTranslator("code-bucket").translate_resource("META-INF/services/x.y.Z")
    assert request.key == "META-INF/services/x.y.Z"


@pytest.mark.parametrize("name", [None, "", "1abc", ".Foo", "-x"])
def test_invalid_names_rejected(name):
    with pytest.raises(InvalidNameError):
        FixedBucketTranslator("code-bucket").translate(name)


@pytest.mark.parametrize("name", ["Foo", "_private.Mod", "$Proxy1", "élan.Été"])
def test_identifier_start_names_accepted(name):
    assert validate_artifact_name(name) == name


@pytest.mark.parametrize("name", ["€uro.Price", "¢ent", "‿tie.Knot", "＿wide"])
def test_currency_and_connector_start_names_accepted(name):
    assert validate_artifact_name(name) == name


def test_empty_resource_name_untranslatable():
    translator = FixedBucketTranslator("code-bucket")
    assert translator.translate_resource("") is None
    assert translator.translate_resource(None) is None


def test_fixed_bucket_requires_bucket():
    with pytest.raises(ValueError):
        FixedBucketTranslator("")


def test_custom_translator_with_callables():
    def by_prefix(name):
        if name.startswith("public."):
            return FetchRequest(bucket="public-code", key=name + ".bin")
        return None

    translator = CustomTranslator(map_name=by_prefix)
    assert translator.translate("public.Foo").bucket == "public-code"
    assert translator.translate("private.Foo") is None
    assert translator.translate_resource("anything") is None


def test_custom_translator_subclass_override():
    class TenantTranslator(CustomTranslator):
        def map_name(self, name):
            tenant, _, rest = name.partition(".")
            return FetchRequest(bucket=f"tenant-{tenant}", key=artifact_name_to_key(rest), requester_pays=True)

        def map_resource(self, name):
            return FetchRequest(bucket="shared", key=name)

    translator = TenantTranslator()
    request = translator.translate("acme.lib.Util")
    assert request == FetchRequest(bucket="tenant-acme", key="lib/Util.class", requester_pays=True)
    assert translator.translate_resource("logo.png").bucket == "shared"


def test_custom_translator_still_validates_names():
    translator = CustomTranslator(map_name=lambda n: FetchRequest(bucket="b", key=n))
    with pytest.raises(InvalidNameError):
        translator.translate("9lives")


def test_translators_satisfy_protocol():
    assert isinstance(FixedBucketTranslator("b"), NameTranslator)
    assert isinstance(CustomTranslator(), NameTranslator)


def test_fetch_request_is_immutable():
    request = FetchRequest(bucket="b", key="k")
    with pytest.raises(Exception):
        request.key = "other"
