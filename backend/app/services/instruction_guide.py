"""Instruction guide generator for tour hosts."""
from datetime import datetime
from typing import Iterable, List, Optional

from app.services.tour_data_loader import TourAggregate
from app.services.workflow_catalog import WORKFLOW_CATALOG, WorkflowInfo, canonical_order

SAMPLE_ORDERS_NOTE = "**Random demonstration orders** - use system-generated sample orders"


class InstructionGuideGenerator:
    """
    Renders the host-facing tour guide.

    Rules:
    - No randomness: identical input yields identical text
    - The only time-dependent value is ``generated_at``, which callers may pin
    - Demonstration sections follow the canonical workflow order
    """

    def render(
        self,
        tour: TourAggregate,
        workflows: Optional[Iterable] = None,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """
        Render the guide.

        Args:
            tour: Loaded tour aggregate
            workflows: Workflows to cover (defaults to the tour's selection)
            generated_at: Timestamp printed in the footer (defaults to now)

        Returns:
            Markdown guide text
        """
        generated_at = generated_at or datetime.now()
        selection = canonical_order(tour.selected_workflows if workflows is None else workflows)
        guide_date = tour.tour_date or generated_at.date()

        lines: List[str] = []
        lines += [
            "# WAREHOUSE TOUR GUIDE",
            "",
            "## Tour Overview",
            f"**Date:** {guide_date.isoformat()}",
            f"**Warehouse:** {tour.warehouse.name}",
            f"**Host:** {tour.host.display_name}",
            f"**Participants:** {len(tour.participants)}",
            "**Duration:** Approximately 45-60 minutes",
            "",
        ]
        lines += self._numbered_section(
            "WELCOME & INTRODUCTION (5 minutes)",
            (
                "**Welcome participants** and introduce yourself",
                "**Safety briefing** - warehouse safety rules and procedures",
                "**Tour overview** - explain what they'll see and experience",
                "**Q&A expectations** - encourage questions throughout",
            ),
        )
        lines += self._numbered_section(
            "WAREHOUSE OVERVIEW (10 minutes)",
            (
                "**Facility tour** - show the physical layout",
                "**Technology stack** - introduce the order-management and warehouse systems",
                "**Daily operations** - explain typical workflow and volume",
                "**Team structure** - roles and responsibilities",
            ),
        )

        for number, workflow in enumerate(selection, start=1):
            lines += self._demonstration_section(number, WORKFLOW_CATALOG[workflow])

        lines += [
            "## DASHBOARD DEMO (8 minutes)",
            "**Location:** Office area or mobile device",
            "",
            "### What to show:",
            "- **Real-time inventory** - live stock levels and locations",
            "- **Order management** - from receipt to fulfillment",
            "- **Analytics dashboard** - performance metrics and insights",
            "- **Mobile integration** - warehouse operations on mobile devices",
            "",
            "### Key talking points:",
            '- "Complete visibility into all warehouse operations"',
            '- "Data-driven decisions with real-time analytics"',
            '- "Mobile-first design for modern workforce"',
            "",
        ]
        lines += self._numbered_section(
            "Q&A AND WRAP-UP (5-10 minutes)",
            (
                "**Open discussion** - answer specific questions",
                "**Next steps** - how to get started",
                "**Contact information** - provide follow-up resources",
                "**Thank participants** - appreciate their time",
            ),
        )
        lines += [
            "## FOLLOW-UP ACTIONS",
            "- [ ] Send thank you email with tour summary",
            "- [ ] Provide pricing and implementation timeline",
            "- [ ] Schedule follow-up demo if requested",
            "- [ ] Connect with technical team for detailed questions",
            "",
            "## KEY SUCCESS METRICS TO HIGHLIGHT",
            "- **99.9% accuracy** with light-guided systems",
            "- **50% reduction** in training time for new workers",
            "- **3-5x productivity** increase with batch picking",
            "- **Real-time visibility** into all operations",
            "- **Seamless integration** with existing systems",
            "",
            "## PRODUCTS FOR DEMONSTRATION",
            f"**Selected SKUs:** {', '.join(tour.selected_product_ids)}",
            "*Use these products throughout all demonstrations for consistency*",
            "",
            "---",
            f"*Generated on: {generated_at.isoformat(sep=' ', timespec='seconds')}*",
            f"*Tour ID: {tour.id}*",
        ]
        return "\n".join(lines) + "\n"

    def _numbered_section(self, title: str, items: Iterable[str]) -> List[str]:
        lines = [f"## {title}"]
        lines += [f"{index}. {item}" for index, item in enumerate(items, start=1)]
        lines.append("")
        return lines

    def _demonstration_section(self, number: int, info: WorkflowInfo) -> List[str]:
        lines = [
            f"## DEMONSTRATION {number}: {info.guide_title}",
            f"**Time:** {info.duration} | **Location:** {info.location}",
            "",
            "### What to show:",
        ]
        lines += [f"- {item}" for item in info.what_to_show]
        if info.uses_sample_orders:
            lines.append(f"- {SAMPLE_ORDERS_NOTE}")
        lines += ["", "### Key talking points:"]
        lines += [f'- "{point}"' for point in info.talking_points]
        lines.append("")
        return lines
