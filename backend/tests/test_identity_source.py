"""
Tests for IdentitySource and CelebrityNameSampler.

Verifies:
- Participant slots use participant data with per-field fallbacks
- Generated slots use sampled names, then Demo / Customer <n>
- Host slots use the host's name with numbered host e-mails
"""
import random
from uuid import uuid4

import pytest

from app.services.identity_source import (
    CELEBRITY_NAMES,
    CelebrityNameSampler,
    IdentityKind,
    IdentitySource,
)
from app.services.tour_data_loader import HostInfo, ParticipantInfo, TourAggregate, WarehouseInfo


def _tour(participants=(), host=None) -> TourAggregate:
    return TourAggregate(
        id=uuid4(),
        warehouse=WarehouseInfo(id=uuid4(), name="Main", external_warehouse_id="WH-1"),
        host=host or HostInfo(id=uuid4(), first_name="Jordan", last_name="Lee", display_name="Jordan Lee"),
        participants=tuple(participants),
        selected_workflows=(),
        selected_product_ids=("A",),
    )


class TestParticipantIdentity:
    def test_uses_participant_fields(self):
        participant = ParticipantInfo(
            id=uuid4(), first_name="Grace", last_name="Hopper", email="grace@navy.example", company="Navy"
        )
        identity = IdentitySource(_tour([participant])).resolve(IdentityKind.PARTICIPANT, 0)

        assert identity.first_name == "Grace"
        assert identity.last_name == "Hopper"
        assert identity.email == "grace@navy.example"
        assert identity.company == "Navy"

    def test_missing_fields_fall_back(self):
        blank = ParticipantInfo(id=uuid4(), first_name="", last_name="", email="")
        source = IdentitySource(_tour([blank, blank]))

        identity = source.resolve("participant", 1)

        assert identity.first_name == "Participant"
        assert identity.last_name == "2"
        assert identity.email == "participant2@demo.com"
        assert identity.company == ""

    def test_out_of_range_slot_raises(self):
        with pytest.raises(IndexError):
            IdentitySource(_tour()).resolve(IdentityKind.PARTICIPANT, 0)


class TestGeneratedIdentity:
    def test_sampled_name_and_email(self):
        source = IdentitySource(_tour(), [("Samuel", "L Jackson"), ("Lady", "Gaga")])

        identity = source.resolve(IdentityKind.GENERATED, 0)

        assert identity.full_name == "Samuel L Jackson"
        assert identity.email == "samuel.ljackson@demo.com"

    def test_slots_beyond_sample_use_demo_customer(self):
        source = IdentitySource(_tour(), [("Lady", "Gaga")])

        identity = source.resolve(IdentityKind.GENERATED, 3)

        assert identity.first_name == "Demo"
        assert identity.last_name == "Customer 4"
        assert identity.email == "demo.customer4@demo.com"


class TestHostIdentity:
    def test_host_name_with_numbered_email(self):
        source = IdentitySource(_tour())

        identities = [source.resolve(IdentityKind.HOST, i) for i in range(3)]

        assert {identity.full_name for identity in identities} == {"Jordan Lee"}
        assert [identity.email for identity in identities] == [
            "host.demo1@example.com",
            "host.demo2@example.com",
            "host.demo3@example.com",
        ]

    def test_host_without_names(self):
        host = HostInfo(id=uuid4(), first_name="", last_name="", display_name="")
        identity = IdentitySource(_tour(host=host)).resolve(IdentityKind.HOST, 0)

        assert identity.first_name == "Host"
        assert identity.last_name == "Demo"

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            IdentitySource(_tour()).resolve("robot", 0)


class TestCelebrityNameSampler:
    def test_samples_without_replacement(self, rng):
        names = CelebrityNameSampler(rng).sample(10)

        assert len(names) == 10
        assert len(set(names)) == 10
        assert set(names) <= set(CELEBRITY_NAMES)

    def test_request_larger_than_list_returns_every_name_once(self, rng):
        names = CelebrityNameSampler(rng).sample(len(CELEBRITY_NAMES) + 5)

        assert sorted(names) == sorted(CELEBRITY_NAMES)

    def test_seeded_sampling_is_reproducible(self):
        first = CelebrityNameSampler(random.Random(3)).sample(5)
        second = CelebrityNameSampler(random.Random(3)).sample(5)

        assert first == second

    def test_zero_count(self, rng):
        assert CelebrityNameSampler(rng).sample(0) == []
