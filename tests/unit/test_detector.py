"""Tests for single-collection deduplication and cross-collection matching."""

import itertools
from collections.abc import Callable

import pytest

from pimdedupe.engine import (
    ContactPolicy,
    DuplicateDetectionConfig,
    KeyIndex,
    TaskPolicy,
    deduplicate,
    find_duplicates_against_existing,
    get_duplicate_ids,
)
from pimdedupe.models import ContactRecord, TaskRecord


def _ids(records: list) -> list[str]:
    return [r.id for r in records]


ALL_CONFIGS = [
    DuplicateDetectionConfig(use_uid=u, use_name=n, use_email=e, use_phone=p)
    for u, n, e, p in itertools.product([True, False], repeat=4)
]

# Configs without phone-only divergence between detector and matcher
CONSISTENT_CONFIGS = [
    DuplicateDetectionConfig(),
    DuplicateDetectionConfig(use_uid=False),
    DuplicateDetectionConfig(use_email=False),
    DuplicateDetectionConfig(use_uid=False, use_name=False),
    DuplicateDetectionConfig(use_uid=False, use_name=False, use_email=False),
]

# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_dedupe_default_config_scenario() -> None:
    """Test the name+email example keeps 1 and 3, drops 2."""
    records = [
        ContactRecord.from_dict(
            {"id": "1", "formattedName": "Jane Doe", "emails": [{"email": "jane@x.com"}]}
        ),
        ContactRecord.from_dict(
            {"id": "2", "formattedName": "jane doe", "emails": [{"email": "JANE@X.COM"}]}
        ),
        ContactRecord.from_dict(
            {"id": "3", "formattedName": "Bob", "emails": [{"email": "bob@x.com"}]}
        ),
    ]

    result = deduplicate(records, ContactPolicy())

    assert _ids(result.unique) == ["1", "3"]
    assert _ids(result.duplicates) == ["2"]


@pytest.mark.unit
def test_dedupe_uid_precedence_scenario() -> None:
    """Test equal uids collapse records with unrelated names."""
    records = [
        ContactRecord.from_dict({"id": "1", "uid": "abc", "formattedName": "Jane"}),
        ContactRecord.from_dict({"id": "2", "uid": "abc", "formattedName": "Totally Different"}),
    ]
    policy = ContactPolicy()

    assert policy.comparison_key(records[0]) == policy.comparison_key(records[1]) == "uid:abc"

    result = deduplicate(records, policy)

    assert _ids(result.unique) == ["1"]
    assert _ids(result.duplicates) == ["2"]


@pytest.mark.unit
def test_dedupe_email_only_scenario(make_contact: Callable[..., ContactRecord]) -> None:
    """Test email-only config merges different names sharing an email."""
    policy = ContactPolicy(
        {"use_uid": False, "use_name": False, "use_email": True, "use_phone": False}
    )
    records = [
        make_contact("1", "Jane Doe", emails=["jane@x.com"]),
        make_contact("2", "J. D.", emails=["jane@x.com"]),
    ]

    result = deduplicate(records, policy)

    assert _ids(result.unique) == ["1"]
    assert _ids(result.duplicates) == ["2"]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize("position", [0, 1, 3])
def test_first_seen_wins_with_interspersed_records(
    make_contact: Callable[..., ContactRecord], position: int
) -> None:
    """Test the earlier of two duplicates is kept regardless of filler."""
    filler = [make_contact(f"f{i}", f"Filler {i}", emails=[f"f{i}@x.com"]) for i in range(4)]
    a = make_contact("A", "Jane", emails=["jane@x.com"])
    b = make_contact("B", "JANE", emails=["Jane@x.com"])

    records = filler[:position] + [a] + filler[position:] + [b]
    result = deduplicate(records, ContactPolicy())

    assert "A" in _ids(result.unique)
    assert _ids(result.duplicates) == ["B"]


@pytest.mark.unit
@pytest.mark.parametrize("config", ALL_CONFIGS, ids=lambda c: str(sorted(c.to_dict().items())))
def test_empty_signal_records_never_collide(
    make_contact: Callable[..., ContactRecord], config: DuplicateDetectionConfig
) -> None:
    """Test contacts with no name, email, phone or uid stay unique."""
    records = [make_contact(str(i), "") for i in range(3)]

    result = deduplicate(records, ContactPolicy(config))

    assert _ids(result.unique) == ["0", "1", "2"]
    assert result.duplicates == []


@pytest.mark.unit
def test_name_normalization_duplicates(make_contact: Callable[..., ContactRecord]) -> None:
    """Test whitespace/case variants are duplicates with name as sole signal."""
    policy = ContactPolicy({"use_email": False, "use_phone": False})
    records = [make_contact("1", "Jane Doe"), make_contact("2", "  jane   doe ")]

    assert get_duplicate_ids(records, policy) == ["2"]


@pytest.mark.unit
def test_representative_kept_after_duplicate(make_contact: Callable[..., ContactRecord]) -> None:
    """Test later records compare against the first-seen record."""
    policy = ContactPolicy()
    first = make_contact("1", "Jane", emails=["jane@x.com"])
    dup = make_contact("2", "Jane", emails=["jane@x.com", "alt@x.com"])
    third = make_contact("3", "Jane", emails=["jane@x.com"])

    result = deduplicate([first, dup, third], policy)

    assert _ids(result.duplicates) == ["2", "3"]


@pytest.mark.unit
def test_representative_replaced_on_collision(make_contact: Callable[..., ContactRecord]) -> None:
    """Test a same-key non-duplicate becomes the new representative."""
    # name-only key with a co-signal rule: key collides, rule rejects
    policy = ContactPolicy({"use_email": False, "use_phone": True})
    first = make_contact("1", "Jane", phones=["111 1111"])
    second = make_contact("2", "Jane", phones=["222 2222"])
    third = make_contact("3", "Jane", phones=["222-2222"])
    fourth = make_contact("4", "Jane", phones=["111-1111"])

    result = deduplicate([first, second, third, fourth], policy)

    # 4 only collides with the current representative (3), not with 1
    assert _ids(result.unique) == ["1", "2", "4"]
    assert _ids(result.duplicates) == ["3"]


@pytest.mark.unit
@pytest.mark.parametrize("config", CONSISTENT_CONFIGS, ids=lambda c: str(sorted(c.to_dict().items())))
def test_matcher_agrees_with_concatenated_dedupe(
    make_contact: Callable[..., ContactRecord], config: DuplicateDetectionConfig
) -> None:
    """Test matching new against existing agrees with deduping existing ++ new."""
    existing = [
        make_contact("e1", "Jane Doe", uid="u-jane", emails=["jane@x.com"]),
        make_contact("e2", "Bob", emails=["bob@x.com", "robert@x.com"]),
        make_contact("e3", "Carol"),
    ]
    new = [
        make_contact("n1", "jane doe", uid="u-jane", emails=["other@x.com"]),
        make_contact("n2", "BOB", emails=["bob@x.com"]),
        make_contact("n3", "Dave", emails=["dave@x.com"]),
        make_contact("n4", "carol"),
        make_contact("n5", "Someone", emails=["BOB@x.com"]),
    ]
    policy = ContactPolicy(config)

    matched = find_duplicates_against_existing(new, existing, policy)
    combined = deduplicate(existing + new, policy)

    would_be_duplicate = [r.id for r in combined.duplicates if r.id.startswith("n")]
    assert matched.duplicate_ids == would_be_duplicate


@pytest.mark.unit
def test_matcher_does_not_dedupe_within_new(make_contact: Callable[..., ContactRecord]) -> None:
    """Test duplicates inside the new batch are both reported unique."""
    new = [
        make_contact("n1", "Jane", emails=["jane@x.com"]),
        make_contact("n2", "Jane", emails=["jane@x.com"]),
    ]

    result = find_duplicates_against_existing(new, [], ContactPolicy())

    assert _ids(result.unique) == ["n1", "n2"]
    assert result.duplicates == []


@pytest.mark.unit
def test_matcher_checks_every_candidate(make_contact: Callable[..., ContactRecord]) -> None:
    """Test any existing record in the bucket can confirm a duplicate."""
    policy = ContactPolicy({"use_email": False, "use_phone": True})
    existing = [
        make_contact("e1", "Jane", phones=["111 1111"]),
        make_contact("e2", "Jane", phones=["222 2222"]),
    ]
    new = [make_contact("n1", "jane", phones=["2222222"])]

    result = find_duplicates_against_existing(new, existing, policy)

    assert result.duplicate_ids == ["n1"]


@pytest.mark.unit
def test_inputs_not_mutated(make_contact: Callable[..., ContactRecord]) -> None:
    """Test neither function reorders or mutates its inputs."""
    existing = [make_contact("e1", "Jane", emails=["jane@x.com"])]
    new = [make_contact("n2", "Bob"), make_contact("n1", "Jane", emails=["jane@x.com"])]
    existing_copy, new_copy = list(existing), list(new)

    find_duplicates_against_existing(new, existing, ContactPolicy())
    deduplicate(new, ContactPolicy())

    assert existing == existing_copy
    assert new == new_copy


@pytest.mark.unit
def test_same_object_twice_partitions_by_position(
    make_contact: Callable[..., ContactRecord],
) -> None:
    """Test a record repeated in the input is kept once and flagged once."""
    jane = make_contact("1", "Jane", emails=["jane@x.com"])

    result = deduplicate([jane, jane], ContactPolicy())

    assert len(result.unique) == 1
    assert len(result.duplicates) == 1


@pytest.mark.unit
def test_empty_inputs() -> None:
    """Test empty collections produce empty partitions."""
    assert deduplicate([], ContactPolicy()).unique == []
    assert find_duplicates_against_existing([], [], TaskPolicy()).duplicates == []
    assert get_duplicate_ids([], ContactPolicy()) == []


@pytest.mark.unit
def test_dedupe_result_to_dict(make_contact: Callable[..., ContactRecord]) -> None:
    """Test result serialization uses record dictionaries."""
    records = [make_contact("1", "Jane"), make_contact("2", "Jane")]
    policy = ContactPolicy({"use_email": False})

    data = deduplicate(records, policy).to_dict()

    assert [r["id"] for r in data["unique"]] == ["1"]
    assert [r["id"] for r in data["duplicates"]] == ["2"]


@pytest.mark.unit
def test_key_index_groups_all_records(make_contact: Callable[..., ContactRecord]) -> None:
    """Test the index keeps every record of a bucket in order."""
    policy = ContactPolicy()
    records = [
        make_contact("1", "Jane", emails=["jane@x.com"]),
        make_contact("2", "jane", emails=["JANE@x.com"]),
        make_contact("3", "Bob"),
    ]

    index = KeyIndex(policy, records)

    assert len(index) == 2
    assert _ids(index.candidates("jane|jane@x.com")) == ["1", "2"]
    assert index.candidates("missing") == []


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_dedupe_tasks(make_task: Callable[..., TaskRecord]) -> None:
    """Test tasks dedupe by title and date bucket."""
    tasks = [
        make_task("1", "Buy milk", due="2026-01-01T12:00:05+00:00"),
        make_task("2", "buy milk", due="2026-01-01T12:00:40+00:00"),
        make_task("3", "Buy milk"),
        make_task("4", "Buy milk"),
        make_task("5", "Buy milk", due="2026-01-02T12:00:00+00:00"),
        make_task("6", "Other", uid="x"),
        make_task("7", "Renamed", uid="x"),
    ]

    result = deduplicate(tasks, TaskPolicy())

    assert _ids(result.unique) == ["1", "3", "5", "6"]
    assert _ids(result.duplicates) == ["2", "4", "7"]


@pytest.mark.unit
def test_dedupe_tasks_bucket_boundary(make_task: Callable[..., TaskRecord]) -> None:
    """Test close dates straddling a bucket boundary are not compared."""
    tasks = [
        make_task("1", "Buy milk", due="2026-01-01T12:00:59+00:00"),
        make_task("2", "Buy milk", due="2026-01-01T12:01:01+00:00"),
    ]

    result = deduplicate(tasks, TaskPolicy())

    assert result.duplicates == []
