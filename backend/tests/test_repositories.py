"""Data-access layer against a real SQLite file."""

import pytest
from sqlalchemy.exc import IntegrityError

from zeo_api.db.models import TourActivity, TourHighlight, TourInclusion
from zeo_api.db.repositories import (
    IN_CLAUSE_CHUNK,
    ActivityRepository,
    DestinationRepository,
    SliderRepository,
    TourRepository,
)

from conftest import activity_data, destination_data, tour_data


def test_destination_lookup_by_slug_matches_id(db):
    repo = DestinationRepository(db)
    for name in ("Pokhara", "Chitwan", "Lumbini"):
        repo.insert(destination_data(name=name, slug=name.lower()))

    for destination in repo.get_all():
        assert repo.get_by_slug(destination["slug"])["id"] == destination["id"]


def test_destinations_sorted_by_name_and_flags_default(db):
    repo = DestinationRepository(db)
    repo.insert(destination_data(name="Pokhara", slug="pokhara", featured=None))
    repo.insert(destination_data(name="Bandipur", slug="bandipur", featured=True))

    names = [d["name"] for d in repo.get_all()]
    assert names == ["Bandipur", "Pokhara"]
    assert repo.get_by_slug("pokhara")["featured"] == 0
    assert repo.get_by_slug("bandipur")["featured"] == 1


def test_missing_rows_return_none(db):
    assert DestinationRepository(db).get_by_slug("nowhere") is None
    assert ActivityRepository(db).get_by_slug("nothing") is None
    assert TourRepository(db).get_by_id(404) is None
    assert SliderRepository(db).get_by_id(404) is None


def test_destination_search_is_case_insensitive(db):
    repo = DestinationRepository(db)
    repo.insert(destination_data())
    repo.insert(destination_data(name="Thimphu", slug="thimphu", country="Bhutan"))

    assert [d["slug"] for d in repo.search("POKH")] == ["pokhara"]
    assert [d["slug"] for d in repo.search("bhutan")] == ["thimphu"]


def test_duplicate_slug_raises_and_session_stays_usable(db):
    repo = DestinationRepository(db)
    repo.insert(destination_data())

    with pytest.raises(IntegrityError):
        repo.insert(destination_data(name="Pokhara again"))

    assert repo.count() == 1


def test_activity_insert_defaults(db):
    repo = ActivityRepository(db)
    activity_id = repo.insert({"name": "Rafting", "slug": "rafting", "image": "r.jpg"})["last_id"]

    activity = repo.get_by_id(activity_id)
    assert activity["description"] == ""
    assert activity["icon"] == ""
    assert activity["featured"] == 0


def test_upsert_inserts_then_updates(db):
    repo = DestinationRepository(db)
    first = repo.upsert(destination_data(rating=4.0))
    second = repo.upsert(destination_data(rating=4.9))

    assert first["created"] is True
    assert second["created"] is False
    assert second["last_id"] == first["last_id"]
    assert repo.count() == 1
    assert repo.get_by_slug("pokhara")["rating"] == 4.9


def test_partial_update_leaves_other_columns(db):
    repo = DestinationRepository(db)
    destination_id = repo.insert(destination_data())["last_id"]

    updated = repo.update(destination_id, {"rating": 3.9})
    assert updated["rating"] == 3.9
    assert updated["name"] == "Pokhara"
    assert repo.update(9999, {"rating": 1.0}) is None


class TestTours:

    def test_insert_then_get_round_trips_children(self, db):
        activities = ActivityRepository(db)
        paragliding = activities.insert(activity_data())["last_id"]
        boating = activities.insert(activity_data(name="Boating", slug="boating"))["last_id"]

        tours = TourRepository(db)
        tour_id = tours.insert(
            tour_data(
                highlights=["Sarangkot sunrise", "World Peace Pagoda"],
                inclusions=["Hotel pickup", "Lunch"],
                activity_ids=[paragliding, boating, paragliding],
            )
        )["last_id"]

        tour = tours.get_by_id(tour_id)
        assert tour["highlights"] == ["Sarangkot sunrise", "World Peace Pagoda"]
        assert tour["inclusions"] == ["Hotel pickup", "Lunch"]
        assert [a["slug"] for a in tour["activities"]] == ["paragliding", "boating"]

    def test_tour_without_children_gets_empty_lists(self, db):
        tours = TourRepository(db)
        tour_id = tours.insert(tour_data())["last_id"]

        tour = tours.get_by_id(tour_id)
        assert tour["highlights"] == []
        assert tour["inclusions"] == []
        assert tour["activities"] == []
        assert tour["destination_name"] is None
        assert tour["destination_slug"] is None
        assert tour["reviews"] == 12

    def test_failed_child_insert_rolls_back_the_tour(self, db):
        tours = TourRepository(db)

        with pytest.raises(IntegrityError):
            tours.insert(tour_data(highlights=["Lake"], activity_ids=[9999]))

        assert tours.count() == 0
        assert db.query(TourHighlight).count() == 0
        assert tours.get_by_slug("pokhara-day-trip") is None

    def test_get_all_orders_featured_then_rating(self, db):
        tours = TourRepository(db)
        for slug, featured, rating in [
            ("a", False, 4.9),
            ("b", True, 4.1),
            ("c", True, 4.7),
            ("d", False, 3.2),
            ("e", True, 4.7),
        ]:
            tours.insert(tour_data(title=slug, slug=slug, featured=featured, rating=rating))

        result = tours.get_all()
        assert [t["slug"] for t in result] == ["c", "e", "b", "a", "d"]

        flags = [t["featured"] for t in result]
        assert flags == sorted(flags, reverse=True)
        for group in (1, 0):
            ratings = [t["rating"] for t in result if t["featured"] == group]
            assert ratings == sorted(ratings, reverse=True)

    def test_tour_listed_once_by_destination_and_in_all(self, db, seeded):
        tours = TourRepository(db)
        tours.insert(tour_data(title="Elsewhere", slug="elsewhere"))

        by_destination = tours.get_by_destination(seeded["destination_id"])
        assert [t["id"] for t in by_destination] == [seeded["tour_id"]]
        assert by_destination[0]["destination_name"] == "Pokhara"
        assert by_destination[0]["destination_slug"] == "pokhara"

        all_ids = [t["id"] for t in tours.get_all()]
        assert all_ids.count(seeded["tour_id"]) == 1
        assert len(all_ids) == 2

    def test_get_by_activity(self, db, seeded):
        tours = TourRepository(db)
        linked = tours.insert(
            tour_data(title="Fly", slug="fly", activity_ids=[seeded["activity_id"]])
        )["last_id"]

        assert [t["id"] for t in tours.get_by_activity(seeded["activity_id"])] == [linked]
        assert tours.get_by_activity(9999) == []

    def test_search_matches_title_substring_and_destination_name(self, db, seeded):
        tours = TourRepository(db)
        tours.insert(tour_data(title="Annapurna Circuit", slug="annapurna-circuit", location="Manang"))

        assert [t["slug"] for t in tours.search("day TRIP")] == ["pokhara-day-trip"]
        # no tour text mentions "Lakeside"; the destination description does not count either
        assert tours.search("lakeside") == []
        assert [t["slug"] for t in tours.search("pokhara")] == ["pokhara-day-trip"]
        assert [t["slug"] for t in tours.search("circuit")] == ["annapurna-circuit"]

    def test_get_featured_respects_limit(self, db):
        tours = TourRepository(db)
        for index in range(4):
            tours.insert(tour_data(title=f"T{index}", slug=f"t{index}", featured=index != 0))

        featured = tours.get_featured(2)
        assert len(featured) == 2
        assert all(t["featured"] == 1 for t in featured)

    def test_deleting_destination_detaches_tours(self, db, seeded):
        assert DestinationRepository(db).delete(seeded["destination_id"]) == 1

        tour = TourRepository(db).get_by_id(seeded["tour_id"])
        assert tour is not None
        assert tour["destination_id"] is None
        assert tour["destination_name"] is None

    def test_deleting_tour_removes_children(self, db, seeded):
        tours = TourRepository(db)
        tours.update(seeded["tour_id"], {"activity_ids": [seeded["activity_id"]]})

        assert tours.delete(seeded["tour_id"]) == 1
        assert tours.delete(seeded["tour_id"]) == 0
        for child in (TourHighlight, TourInclusion, TourActivity):
            assert db.query(child).count() == 0
        # the activity itself survives
        assert ActivityRepository(db).get_by_id(seeded["activity_id"]) is not None

    def test_update_replaces_only_given_child_lists(self, db, seeded):
        tours = TourRepository(db)
        tour = tours.update(seeded["tour_id"], {"price": 99.0, "highlights": ["Only this"]})

        assert tour["price"] == 99.0
        assert tour["highlights"] == ["Only this"]
        assert tour["inclusions"] == ["Hotel pickup"]
        assert tours.update(9999, {"price": 1.0}) is None

    def test_upsert_replaces_children(self, db):
        tours = TourRepository(db)
        tours.upsert(tour_data(highlights=["One", "Two"], inclusions=["Guide"]))
        result = tours.upsert(tour_data(highlights=["Three"]))

        tour = tours.get_by_slug("pokhara-day-trip")
        assert result["created"] is False
        assert tour["highlights"] == ["Three"]
        assert tour["inclusions"] == []
        assert tours.count() == 1

    def test_enrichment_spans_multiple_in_chunks(self, db):
        tours = TourRepository(db)
        total = IN_CLAUSE_CHUNK + 3
        for index in range(total):
            tours.insert(
                tour_data(title=f"T{index}", slug=f"t{index}", highlights=[f"h{index}"], featured=False)
            )

        result = tours.get_all()
        assert len(result) == total
        assert all(t["highlights"] == [f"h{t['slug'][1:]}"] for t in result)


class TestSliders:

    def test_active_sliders_in_display_order(self, slider_repo):
        slider_repo.insert({"title": "Second", "image": "2.jpg", "order_index": 2})
        slider_repo.insert({"title": "Hidden", "image": "h.jpg", "order_index": 0, "is_active": False})
        slider_repo.insert({"title": "First", "image": "1.jpg", "order_index": 1})

        assert [s["title"] for s in slider_repo.get_active()] == ["First", "Second"]
        assert [s["title"] for s in slider_repo.get_all()] == ["Hidden", "First", "Second"]

    def test_insert_defaults(self, slider_repo):
        slider_id = slider_repo.insert({"title": "Plain", "image": "p.jpg"})["last_id"]

        slider = slider_repo.get_by_id(slider_id)
        assert slider["subtitle"] == ""
        assert slider["location"] == ""
        assert slider["video"] is None
        assert slider["order_index"] == 0
        assert slider["is_active"] == 1

    def test_get_by_id_ignores_active_flag(self, slider_repo):
        slider_id = slider_repo.insert({"title": "Off", "image": "o.jpg", "is_active": False})["last_id"]
        assert slider_repo.get_by_id(slider_id)["is_active"] == 0
