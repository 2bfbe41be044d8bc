import pytest

from sanitize_engine.category import Category


@pytest.mark.parametrize(
    "category, expected",
    [
        (Category.EMAIL, "email"),
        (Category.CREDIT_CARD, "credit_card"),
        (Category.IPV4, "ipv4"),
        (Category.AZURE_RESOURCE_ID, "azure_resource_id"),
    ],
)
def test_builtin_as_str(category, expected):
    assert category.as_str() == expected
    assert str(category) == expected
    assert category.domain_tag_hmac() == expected


def test_custom_display_and_name():
    cat = Category.custom("api_key")
    assert cat.as_str() == "api_key"
    assert str(cat) == "custom:api_key"


def test_custom_cannot_collide_with_builtin():
    custom_email = Category.custom("email")
    assert custom_email.as_str() == Category.EMAIL.as_str()
    assert custom_email.domain_tag_hmac().startswith("custom:")
    assert custom_email.domain_tag_hmac() != Category.EMAIL.domain_tag_hmac()
    assert (custom_email == Category.EMAIL) is False


def test_equality_and_hashing():
    table = {Category.custom("x"): 1, Category.EMAIL: 2}
    assert table[Category.custom("x")] == 1
    assert table[Category("email")] == 2
    assert Category("email") == Category.EMAIL


def test_unknown_builtin_rejected():
    with pytest.raises(ValueError):
        Category("not_a_category")