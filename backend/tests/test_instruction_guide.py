"""
Test for deterministic behavior of InstructionGuideGenerator.render().

Verifies:
- Output text is identical across runs for the same input and timestamp
- Demonstration sections follow the canonical workflow order
- Only workflows that generate sample orders carry the sample-order note
"""
from datetime import date, datetime
from uuid import UUID, uuid4

from app.services.instruction_guide import SAMPLE_ORDERS_NOTE, InstructionGuideGenerator
from app.services.tour_data_loader import HostInfo, ParticipantInfo, TourAggregate, WarehouseInfo
from app.services.workflow_catalog import WorkflowName, canonical_order, parse_workflow_name

GENERATED_AT = datetime(2024, 5, 1, 9, 30, 15, 123456)
TOUR_ID = UUID("12345678-1234-5678-1234-567812345678")


def _tour(workflows, tour_date=date(2024, 5, 15), participants=2) -> TourAggregate:
    return TourAggregate(
        id=TOUR_ID,
        warehouse=WarehouseInfo(id=uuid4(), name="Reno Fulfillment Center", external_warehouse_id="WH-1"),
        host=HostInfo(id=uuid4(), first_name="Jordan", last_name="Lee", display_name="Jordan Lee"),
        participants=tuple(
            ParticipantInfo(id=uuid4(), first_name=f"G{i}", last_name="V", email="")
            for i in range(participants)
        ),
        selected_workflows=tuple(workflows),
        selected_product_ids=("A", "B", "C"),
        tour_date=tour_date,
    )


class TestDeterminism:
    def test_same_input_same_text(self):
        """
        Test: render() is byte-identical for identical input and timestamp.
        """
        generator = InstructionGuideGenerator()
        tour = _tour(["bulk_shipping", "pack_to_light"])

        first = generator.render(tour, generated_at=GENERATED_AT)
        second = generator.render(tour, generated_at=GENERATED_AT)

        assert first == second

    def test_selection_order_does_not_change_text(self):
        generator = InstructionGuideGenerator()

        forward = generator.render(_tour(["receive_to_light", "multi_item_batch"]), generated_at=GENERATED_AT)
        reverse = generator.render(_tour(["multi_item_batch", "receive_to_light"]), generated_at=GENERATED_AT)

        assert forward == reverse


class TestContent:
    def test_overview_and_footer(self):
        guide = InstructionGuideGenerator().render(_tour(["pack_to_light"]), generated_at=GENERATED_AT)

        assert guide.startswith("# WAREHOUSE TOUR GUIDE\n")
        assert "**Date:** 2024-05-15" in guide
        assert "**Warehouse:** Reno Fulfillment Center" in guide
        assert "**Host:** Jordan Lee" in guide
        assert "**Participants:** 2" in guide
        assert "**Selected SKUs:** A, B, C" in guide
        assert guide.endswith(
            "*Generated on: 2024-05-01 09:30:15*\n"
            "*Tour ID: 12345678-1234-5678-1234-567812345678*\n"
        )

    def test_date_falls_back_to_generation_date(self):
        guide = InstructionGuideGenerator().render(_tour([], tour_date=None), generated_at=GENERATED_AT)

        assert "**Date:** 2024-05-01" in guide

    def test_sections_in_canonical_order(self):
        selection = [w.value for w in reversed(list(WorkflowName))]
        guide = InstructionGuideGenerator().render(_tour(selection), generated_at=GENERATED_AT)

        titles = [
            "RECEIVE-TO-LIGHT (R2L)",
            "PACK-TO-LIGHT (P2L)",
            "STANDARD RECEIVING",
            "BULK SHIPPING",
            "SINGLE-ITEM BATCH PICKING",
            "MULTI-ITEM BATCH PICKING",
        ]
        for number, title in enumerate(titles, start=1):
            assert f"## DEMONSTRATION {number}: {title}" in guide
        positions = [guide.index(f"## DEMONSTRATION {n}:") for n in range(1, 7)]
        assert positions == sorted(positions)
        assert guide.index("## WAREHOUSE OVERVIEW") < positions[0]
        assert positions[-1] < guide.index("## DASHBOARD DEMO")

    def test_sample_order_note_only_for_generating_workflows(self):
        generator = InstructionGuideGenerator()

        receiving_only = generator.render(_tour(["receive_to_light", "standard_receiving"]), generated_at=GENERATED_AT)
        with_batches = generator.render(_tour(["single_item_batch", "multi_item_batch"]), generated_at=GENERATED_AT)

        assert SAMPLE_ORDERS_NOTE not in receiving_only
        assert with_batches.count(SAMPLE_ORDERS_NOTE) == 2

    def test_explicit_workflows_override_stored_selection(self):
        guide = InstructionGuideGenerator().render(
            _tour(["pack_to_light"]), workflows=["bulk_shipping"], generated_at=GENERATED_AT
        )

        assert "## DEMONSTRATION 1: BULK SHIPPING" in guide
        assert "PACK-TO-LIGHT" not in guide


class TestWorkflowCatalog:
    def test_parse_accepts_hyphens_and_case(self):
        assert parse_workflow_name("Pack-To-Light") is WorkflowName.PACK_TO_LIGHT
        assert parse_workflow_name("teleport") is None

    def test_canonical_order_drops_unknown_and_duplicates(self):
        result = canonical_order(["multi_item_batch", "nope", "receive_to_light", "multi-item-batch"])

        assert result == [WorkflowName.RECEIVE_TO_LIGHT, WorkflowName.MULTI_ITEM_BATCH]
