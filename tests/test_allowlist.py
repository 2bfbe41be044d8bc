from sanitize_engine.allowlist import AllowlistMatcher, glob_matches


def matcher(*patterns):
    return AllowlistMatcher(list(patterns))


def test_exact_match():
    m = matcher("localhost", "127.0.0.1")
    assert m.is_allowed("localhost")
    assert m.is_allowed("127.0.0.1")
    assert not m.is_allowed("Localhost")
    assert not m.is_allowed("localhost2")


def test_glob_suffix():
    m = matcher("*.internal")
    assert m.is_allowed("db.internal")
    assert m.is_allowed("staging.db.internal")
    assert not m.is_allowed("db.internal.evil")
    assert not m.is_allowed("internal")


def test_glob_prefix():
    m = matcher("192.168.1.*")
    assert m.is_allowed("192.168.1.1")
    assert m.is_allowed("192.168.1.255")
    assert not m.is_allowed("192.168.2.1")
    assert m.is_allowed("192.168.1.")


def test_glob_middle():
    m = matcher("user-*@example.com")
    assert m.is_allowed("user-alice@example.com")
    assert m.is_allowed("user-@example.com")
    assert not m.is_allowed("admin@example.com")
    assert not m.is_allowed("user-alice@example.org")


def test_glob_star_only():
    m = matcher("*")
    assert m.is_allowed("anything")
    assert m.is_allowed("")


def test_seen_counter():
    m = matcher("ok")
    assert m.seen_count() == 0
    m.is_allowed("ok")
    m.is_allowed("ok")
    m.is_allowed("not-ok")
    assert m.seen_count() == 2


def test_regex_char_warning():
    m = AllowlistMatcher(["^bad$"])
    assert len(m.warnings) == 1
    assert "'^bad$'" in m.warnings[0]
    assert "'^'" in m.warnings[0]


def test_plain_patterns_give_no_warnings():
    m = matcher("localhost", "*.internal")
    assert m.warnings == []


def test_empty_allowlist_is_empty():
    m = matcher()
    assert len(m) == 0
    assert not m.is_allowed("anything")


def test_match_pattern_returns_exact_pattern():
    m = matcher("localhost")
    assert m.match_pattern("localhost") == "localhost"
    assert m.match_pattern("other") is None


def test_match_pattern_returns_glob_pattern():
    m = matcher("*.internal")
    assert m.match_pattern("db.internal") == "*.internal"
    assert m.match_pattern("github.com") is None


def test_match_pattern_returns_first_matching_pattern():
    m = matcher("*.internal", "db.*")
    assert m.match_pattern("db.internal") == "*.internal"


def test_match_pattern_increments_seen_counter():
    m = matcher("ok")
    assert m.seen_count() == 0
    m.match_pattern("ok")
    assert m.seen_count() == 1
    m.match_pattern("not-ok")
    assert m.seen_count() == 1


def test_is_allowed_delegates_to_match_pattern():
    m = matcher("*.internal")
    assert m.is_allowed("db.internal")
    assert not m.is_allowed("github.com")
    assert m.seen_count() == 1


def test_glob_multiple_wildcards():
    m = matcher("a*b*c")
    assert m.is_allowed("abc")
    assert m.is_allowed("aXbYc")
    assert m.is_allowed("aXXXbYYYc")
    assert not m.is_allowed("abX")
    assert not m.is_allowed("Xbc")


def test_glob_adjacent_wildcards_treated_as_one():
    m = matcher("a**b")
    assert m.is_allowed("ab")
    assert m.is_allowed("aXb")
    assert not m.is_allowed("ba")


def test_glob_empty_value_only_matches_star():
    assert matcher("*").is_allowed("")
    assert not matcher("a*").is_allowed("")


def test_glob_prefix_suffix_overlap_rejected():
    m = matcher("a*b")
    assert not m.is_allowed("a")
    assert not m.is_allowed("b")
    assert m.is_allowed("ab")
    assert m.is_allowed("aXb")


def test_glob_matches_without_star_is_exact():
    assert glob_matches("abc", "abc")
    assert not glob_matches("abc", "abcabc")


def test_glob_inner_segment_order_matters():
    assert glob_matches("x*1*2*y", "x-1-2-y")
    assert not glob_matches("x*1*2*y", "x-2-1-y")