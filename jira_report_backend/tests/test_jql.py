from urllib.parse import unquote_plus

from src.core.jql import JqlQueryBuilder, SortColumn, build_jql, quote_value
from src.models.query import FacetSettings, QueryFacets


def test_single_value_list_uses_in_clause():
    jql = JqlQueryBuilder().url_encode(False).statuses(["Done"]).build()
    assert jql == "status IN (Done)"


def test_values_with_space_or_period_are_quoted_after_trimming():
    assert quote_value("  In Progress ") == '"In Progress"'
    assert quote_value("1.0") == '"1.0"'
    assert quote_value(" Done") == "Done"
    assert quote_value("a  b") == '"a  b"'


def test_quoting_is_the_same_for_equality_and_in_clauses():
    jql = JqlQueryBuilder().url_encode(False).fix_version("1.0").fix_version_ids(["1.0", "10200"]).build()
    assert jql == 'fixVersion="1.0" AND fixVersion IN ("1.0",10200)'


def test_legacy_clause_order():
    facets = QueryFacets(
        project="PROJ",
        fix_version="2.1",
        statuses=["Resolved", "Closed"],
        priorities=["High"],
        resolutions=["Fixed"],
        component_ids=["10011", "10012"],
        types=["Bug"],
        encode=False,
    )
    assert build_jql(facets) == (
        'project=PROJ AND fixVersion="2.1" AND status IN (Resolved,Closed) AND priority IN (High) '
        "AND resolution IN (Fixed) AND component IN (10011,10012) AND type IN (Bug)"
    )


def test_empty_and_blank_facets_are_skipped():
    jql = JqlQueryBuilder().url_encode(False).project("  ").statuses([]).types([""]).priorities(None).build()
    assert jql == ""


def test_raw_filter_replaces_facets_but_keeps_sort():
    facets = QueryFacets(
        project="PROJ",
        statuses=["Done"],
        filter="labels = urgent",
        sort_column_names="Key",
        encode=False,
    )
    assert build_jql(facets) == "labels = urgent ORDER BY key ASC"


def test_blank_raw_filter_is_ignored():
    facets = QueryFacets(project="PROJ", filter="   ", encode=False)
    assert build_jql(facets) == "project=PROJ"


def test_sort_columns():
    jql = JqlQueryBuilder().url_encode(False).sort_column_names("Fix Version DESC, Type").build()
    assert jql == "ORDER BY fixversion DESC,type ASC"


def test_sort_is_appended_after_predicate():
    jql = JqlQueryBuilder().url_encode(False).project("PROJ").sort_column_names("Priority desc, Created ASC").build()
    assert jql == "project=PROJ ORDER BY priority DESC,created ASC"


def test_sort_column_keeps_names_ending_in_direction_letters():
    assert SortColumn.parse("Description") == SortColumn("description", False)
    assert SortColumn.parse(" Created  Desc ") == SortColumn("created", True)
    assert SortColumn.parse("CreatedDESC") == SortColumn("createddesc", False)


def test_no_facets_only_sort():
    assert build_jql(QueryFacets(sort_column_names="Key", encode=False)) == "ORDER BY key ASC"
    assert build_jql(QueryFacets(encode=False)) == ""


def test_encoding_round_trip():
    facets = QueryFacets(project="PROJ", statuses=["In Progress", "Done"], sort_column_names="Priority DESC")
    encoded = build_jql(facets)
    assert " " not in encoded
    assert unquote_plus(encoded) == build_jql(facets.model_copy(update={"encode": False}))


def test_encoding_uses_utf8():
    encoded = JqlQueryBuilder().statuses(["Erledigt-ä"]).build()
    assert "%C3%A4" in encoded


def test_builder_is_immutable():
    base = JqlQueryBuilder().url_encode(False).project("PROJ")
    with_status = base.statuses(["Done"])
    assert base.build() == "project=PROJ"
    assert with_status.build() == "project=PROJ AND status IN (Done)"


def test_facet_settings_split_and_fix_for():
    settings = FacetSettings(
        statuses="Resolved, Done",
        types="Bug",
        version_prefix="maven-filtering-",
        version="1.2-SNAPSHOT",
    )
    facets = settings.to_query_facets("MSHARED")
    assert facets.encode is False
    assert facets.fix_version == "maven-filtering-1.2"
    assert build_jql(facets) == (
        'project=MSHARED AND fixVersion="maven-filtering-1.2" AND status IN (Resolved,Done) AND type IN (Bug)'
    )


def test_fix_for_absent_without_version():
    assert FacetSettings(version_prefix="x-").fix_for() is None
    assert FacetSettings(version="3.0").fix_for() == "3.0"
