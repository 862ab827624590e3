"""Tests for the GBIF datasource."""

from __future__ import annotations

import pytest
import requests
from conftest import FakeUpstream, make_response

from redlist_dashboard.datasources.gbif import (
    apply_filters,
    count_occurrences,
    enrich_search_result,
    inat_photos,
    match_species,
    occurrence_count,
    parse_inat_observation,
    parse_recent_observations,
    record_breakdown,
    search_occurrences,
    search_species,
    species_key_facets,
    species_name,
)
from redlist_dashboard.datasources.gbif.breakdown import with_other
from redlist_dashboard.datasources.gbif.species import english_vernacular_name, search_scope_key
from redlist_dashboard.reference.gbif import INAT_DATASET_KEY
from redlist_dashboard.reference.taxa import get_taxon_config

SEARCH = "api.gbif.org/v1/occurrence/search"

INAT_RECORD = {
    "references": "https://www.inaturalist.org/observations/1",
    "eventDate": "2024-05-02T10:11:00",
    "media": [
        {"type": "StillImage", "identifier": "https://img/1.jpg"},
        {"type": "Sound", "identifier": "https://snd/1.mp3"},
    ],
    "verbatimLocality": "Doñana",
    "stateProvince": "Andalucía",
    "country": "Spain",
    "recordedBy": "Ana",
}


class TestApplyFilters:
    def test_all_filters(self) -> None:
        params = apply_filters(
            {"taxonKey": 1}, country="gb", max_uncertainty="1000", data_source="iNaturalist"
        )
        assert params == {
            "taxonKey": 1,
            "country": "GB",
            "coordinateUncertaintyInMeters": "*,1000",
            "datasetKey": INAT_DATASET_KEY,
        }

    def test_publishing_org(self) -> None:
        params = apply_filters({}, data_source="BSBI")
        assert list(params) == ["publishingOrg"]

    def test_unknown_source_ignored(self) -> None:
        assert apply_filters({}, data_source="Flickr") == {}


class TestCountOccurrences:
    def test_count(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {"count": 42, "results": []}, limit=0)
        assert count_occurrences({"taxonKey": 1}) == 42
        assert upstream.calls[0][1] == {"taxonKey": 1, "limit": 0}

    def test_error_is_zero(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {}, status=500)
        assert count_occurrences({"taxonKey": 1}) == 0


class TestOccurrenceSearch:
    def test_search_occurrences(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {"count": 1, "results": [{"key": 9}]})
        data = search_occurrences(2435240, country="es", limit=300)
        assert data["count"] == 1
        params = upstream.calls[0][1]
        assert params["speciesKey"] == 2435240
        assert params["country"] == "ES"
        assert params["hasCoordinate"] == "true"
        assert params["hasGeospatialIssue"] == "false"
        assert params["limit"] == 300

    def test_search_raises_on_error(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {}, status=503)
        with pytest.raises(requests.HTTPError):
            search_occurrences(1)

    def test_facets(self, upstream: FakeUpstream) -> None:
        upstream.json(
            SEARCH,
            {
                "facets": [
                    {
                        "field": "SPECIES_KEY",
                        "counts": [{"name": "11", "count": 90}, {"name": "12", "count": 3}],
                    }
                ]
            },
        )
        assert species_key_facets({"classKey": [359, 212]}) == [(11, 90), (12, 3)]
        params = upstream.calls[0][1]
        assert params["facet"] == "speciesKey"
        assert params["facetLimit"] == 500000
        assert params["classKey"] == [359, 212]

    def test_facets_empty(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {"facets": []})
        assert species_key_facets({"kingdomKey": 6}) == []


class TestParseInatObservation:
    def test_full_record(self) -> None:
        assert parse_inat_observation(INAT_RECORD) == {
            "url": "https://www.inaturalist.org/observations/1",
            "date": "2024-05-02",
            "imageUrl": "https://img/1.jpg",
            "audioUrl": "https://snd/1.mp3",
            "mediaType": "StillImage",
            "location": "Doñana, Andalucía, Spain",
            "observer": "Ana",
        }

    def test_requires_references(self) -> None:
        assert parse_inat_observation({**INAT_RECORD, "references": None}) is None

    def test_requires_media(self) -> None:
        assert parse_inat_observation({**INAT_RECORD, "media": []}) is None

    def test_sound_only(self) -> None:
        record = {"references": "https://x", "media": [{"type": "Sound", "identifier": "s.mp3"}]}
        result = parse_inat_observation(record)
        assert result is not None
        assert result["imageUrl"] is None
        assert result["audioUrl"] == "s.mp3"
        assert result["mediaType"] == "Sound"


class TestParseRecentObservations:
    def test_full_record(self) -> None:
        assert parse_recent_observations([INAT_RECORD]) == [
            {
                "url": "https://www.inaturalist.org/observations/1",
                "date": "2024-05-02",
                "imageUrl": "https://img/1.jpg",
                "location": "Doñana, Andalucía, Spain",
                "observer": "Ana",
            }
        ]

    def test_first_media_item_is_the_image(self) -> None:
        record = {"references": "https://x", "media": [{"type": "Sound", "identifier": "s.mp3"}]}
        assert parse_recent_observations([record])[0]["imageUrl"] == "s.mp3"

    def test_media_optional(self) -> None:
        (result,) = parse_recent_observations([{"references": "https://x", "media": []}])
        assert result == {
            "url": "https://x",
            "date": None,
            "imageUrl": None,
            "location": None,
            "observer": None,
        }

    def test_requires_references(self) -> None:
        assert parse_recent_observations([{**INAT_RECORD, "references": ""}]) == []


class TestInatPhotos:
    def test_page(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {"count": 57, "results": [INAT_RECORD, {"references": None}]})
        result = inat_photos(2435240, country="es", offset=20, limit=10)
        assert result["totalCount"] == 57
        assert len(result["observations"]) == 1
        params = upstream.calls[0][1]
        assert params["datasetKey"] == INAT_DATASET_KEY
        assert params["offset"] == 20
        assert params["country"] == "ES"

    def test_error(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {}, status=500)
        assert inat_photos(1) == {"observations": [], "totalCount": 0}


class TestRecordBreakdown:
    def test_other_clamped(self) -> None:
        counts = {
            "total": 5,
            "humanObservation": 4,
            "preservedSpecimen": 2,
            "machineObservation": 0,
        }
        assert with_other(counts)["other"] == 0

    def test_breakdown(self, upstream: FakeUpstream) -> None:
        upstream.json(SEARCH, {"count": 60}, basisOfRecord="HUMAN_OBSERVATION")
        upstream.json(SEARCH, {"count": 25}, basisOfRecord="PRESERVED_SPECIMEN")
        upstream.json(SEARCH, {"count": 5}, basisOfRecord="MACHINE_OBSERVATION")
        upstream.json(SEARCH, {"count": 40}, datasetKey=INAT_DATASET_KEY, limit=0)
        upstream.json(SEARCH, {"count": 40, "results": [INAT_RECORD]}, datasetKey=INAT_DATASET_KEY)
        upstream.json(SEARCH, {"count": 100}, limit=0)

        result = record_breakdown(2435240, country="es")

        assert result == {
            "humanObservation": 60,
            "preservedSpecimen": 25,
            "machineObservation": 5,
            "other": 10,
            "iNaturalist": 40,
            "recentInatObservations": [parse_inat_observation(INAT_RECORD)],
            "inatTotalCount": 40,
            "total": 100,
        }
        count_params = [p for p in upstream.calls_to(SEARCH) if p.get("limit") == 0]
        assert len(count_params) == 5
        assert all(p["country"] == "ES" for p in count_params)
        assert all(p["hasCoordinate"] == "true" for p in count_params)


class TestSpeciesLookups:
    def test_match_exact(self, upstream: FakeUpstream) -> None:
        upstream.json("species/match", {"usageKey": 2435240, "matchType": "EXACT"})
        assert match_species("Lynx pardinus") == 2435240

    def test_match_higher_rank_rejected(self, upstream: FakeUpstream) -> None:
        upstream.json("species/match", {"usageKey": 2435022, "matchType": "HIGHERRANK"})
        assert match_species("Lynx unknownus") is None

    def test_match_error(self, upstream: FakeUpstream) -> None:
        assert match_species("Lynx pardinus") is None

    def test_species_name(self, upstream: FakeUpstream) -> None:
        upstream.json(
            "species/2435240",
            {"scientificName": "Lynx pardinus (Temminck, 1827)", "canonicalName": "Lynx pardinus",
             "vernacularName": "Iberian Lynx"},
        )  # fmt: skip
        assert species_name(2435240) == ("Lynx pardinus", "Iberian Lynx")

    def test_english_vernacular(self, upstream: FakeUpstream) -> None:
        upstream.json(
            "species/2435240/vernacularNames",
            {"results": [{"vernacularName": "Lince", "language": "spa"},
                         {"vernacularName": "Iberian Lynx", "language": "eng"}]},
        )  # fmt: skip
        assert english_vernacular_name(2435240) == "Iberian Lynx"

    def test_occurrence_count_text(self, upstream: FakeUpstream) -> None:
        upstream.add("occurrence/count", make_response(None, text="1234\n"))
        assert occurrence_count(2435240) == 1234

    def test_occurrence_count_garbage(self, upstream: FakeUpstream) -> None:
        upstream.add("occurrence/count", make_response(None, text="oops"))
        assert occurrence_count(2435240) is None


class TestSearch:
    def test_scope_key(self) -> None:
        assert search_scope_key(get_taxon_config("mammalia")) == 359
        assert search_scope_key(get_taxon_config("reptilia")) == 11592253
        assert search_scope_key(get_taxon_config("plantae")) == 6
        assert search_scope_key(get_taxon_config("all")) is None

    def test_scoped_search(self, upstream: FakeUpstream) -> None:
        upstream.json("species/search", {"results": [{"key": 1}]})
        assert search_species("lynx", get_taxon_config("mammalia"), limit=5) == [{"key": 1}]
        assert upstream.calls[0][1] == {
            "q": "lynx",
            "rank": "SPECIES",
            "limit": 5,
            "highertaxonKey": 359,
        }

    def test_unscoped_search(self, upstream: FakeUpstream) -> None:
        upstream.json("species/search", {"results": []})
        search_species("lynx")
        assert "highertaxonKey" not in upstream.calls[0][1]

    def test_enrich(self, upstream: FakeUpstream) -> None:
        upstream.json(
            "species/2435240/vernacularNames",
            {"results": [{"vernacularName": "Iberian Lynx", "language": "eng"}]},
        )
        upstream.json(SEARCH, {"results": [INAT_RECORD]}, mediaType="StillImage")
        upstream.add("occurrence/count", make_response(None, text="812"))

        result = enrich_search_result(
            {
                "key": 2435240,
                "scientificName": "Lynx pardinus (Temminck, 1827)",
                "canonicalName": "Lynx pardinus",
                "kingdom": "Animalia",
                "family": "Felidae",
                "genus": "Lynx",
            }
        )
        assert result["vernacularName"] == "Iberian Lynx"
        assert result["imageUrl"] == "https://img/1.jpg"
        assert result["occurrenceCount"] == 812
        assert result["gbifUrl"] == "https://www.gbif.org/species/2435240"

    def test_enrich_falls_back_to_result_name(self, upstream: FakeUpstream) -> None:
        result = enrich_search_result({"key": 7, "vernacularName": "Thing"})
        assert result["vernacularName"] == "Thing"
        assert result["imageUrl"] is None
        assert result["occurrenceCount"] is None
