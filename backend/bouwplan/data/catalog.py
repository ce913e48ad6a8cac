"""Default construction catalog: phases, tasks and payment tranches.

The catalog follows a typical Dutch new-build trajectory, from soil survey to
key handover. Builders return fresh objects on every call, so projects never
share mutable state.
"""

from __future__ import annotations

from datetime import UTC, datetime

from bouwplan.models.enums import EvidenceKind
from bouwplan.models.project import Phase, Task, Tranche

PHOTO = EvidenceKind.PHOTO
INSPECTION = EvidenceKind.INSPECTION
DOCUMENT = EvidenceKind.DOCUMENT


def build_default_phases() -> list[Phase]:
    """Build the five construction phases with their 21 tasks."""
    return [
        Phase(
            id="voorbereiding",
            name="Voorbereiding",
            planned_budget=25_000,
            tasks=[
                Task(
                    id="grondonderzoek",
                    name="Grondonderzoek & Sondering",
                    description="Geotechnisch onderzoek van de bouwgrond",
                    required_evidence=[DOCUMENT],
                ),
                Task(
                    id="bouwvergunning",
                    name="Bouwvergunning & Omgevingsvergunning",
                    description="Officiële goedkeuring van de gemeente",
                    required_evidence=[DOCUMENT],
                    unlocks_amount=15_000,
                ),
                Task(
                    id="uitzetwerk",
                    name="Uitzetwerk & Bouwplaats Markering",
                    description="Landmeetkundige markering van de fundering",
                ),
            ],
        ),
        Phase(
            id="fundering",
            name="Fundering",
            planned_budget=55_000,
            tasks=[
                Task(
                    id="uitgraven-bouwput",
                    name="Uitgraven Bouwput",
                    description="Grondwerk voor de funderingsput",
                    unlocks_amount=34_500,
                ),
                Task(
                    id="heipalen",
                    name="Heien & Funderingspalen",
                    description="Plaatsen van betonnen heipalen",
                    required_evidence=[PHOTO],
                ),
                Task(
                    id="wapeningsstaal",
                    name="Wapeningsstaal",
                    description="Wapening As-A t/m D",
                    required_evidence=[PHOTO, INSPECTION],
                ),
                Task(
                    id="betonbon",
                    name="Betonlevering & Betonbon",
                    description="Verificatie betonkwaliteit C30/37",
                    required_evidence=[DOCUMENT],
                ),
                Task(
                    id="storten-fundering",
                    name="Storten Fundering",
                    description="Betonstort en verdichting",
                    required_evidence=[PHOTO],
                    unlocks_amount=15_000,
                ),
                Task(
                    id="uitharding",
                    name="Uitharding & Nabehandeling",
                    description="Betonuitharding en nabehandeling",
                    depends_on=["storten-fundering"],
                    unlocks_amount=45_000,
                ),
            ],
        ),
        Phase(
            id="ruwbouw",
            name="Ruwbouw",
            planned_budget=120_000,
            tasks=[
                Task(
                    id="metselwerk",
                    name="Metselwerk & Gevel",
                    description="Bakstenen gevels en dragende muren",
                ),
                Task(
                    id="dakconstructie",
                    name="Dakconstructie & Spanten",
                    description="Houten dakspanten en constructie",
                ),
                Task(
                    id="dakpannen",
                    name="Dakbedekking & Pannen",
                    description="Dakpannen of andere dakbedekking",
                    required_evidence=[INSPECTION],
                    unlocks_amount=55_000,
                ),
                Task(
                    id="kozijnen",
                    name="Kozijnen & Ramen",
                    description="Ramen, deuren en kozijnen",
                ),
            ],
        ),
        Phase(
            id="afbouw",
            name="Afbouw & Installatie",
            planned_budget=65_000,
            tasks=[
                Task(
                    id="elektra-installatie",
                    name="Elektra Installatie",
                    description="Elektrische bedrading en groepenkast",
                    required_evidence=[PHOTO],
                ),
                Task(
                    id="leidingwerk",
                    name="Leidingwerk & Sanitair",
                    description="Water- en afvoerleidingen",
                    required_evidence=[PHOTO],
                    unlocks_amount=35_000,
                ),
                Task(
                    id="stucwerk",
                    name="Stucwerk & Wanden",
                    description="Binnenafwerking wanden en plafonds",
                ),
                Task(
                    id="vloerleggen",
                    name="Vloeren Leggen",
                    description="Vloerbedekking en afwerking",
                ),
                Task(
                    id="keuken-montage",
                    name="Keuken Montage",
                    description="Keukeninstallatie en apparatuur",
                ),
            ],
        ),
        Phase(
            id="oplevering",
            name="Oplevering",
            planned_budget=33_500,
            tasks=[
                Task(
                    id="eindcontrole",
                    name="Eindcontrole & Keuring",
                    description="Bouwkundige eindkeuring",
                    required_evidence=[INSPECTION],
                ),
                Task(
                    id="sleuteloverdracht",
                    name="Sleuteloverdracht",
                    description="Officiële sleuteloverdracht",
                    required_evidence=[DOCUMENT],
                    unlocks_amount=48_500,
                ),
                Task(
                    id="woning-gereed",
                    name="Woning Gereed",
                    description="Uw droomhuis is klaar!",
                ),
            ],
        ),
    ]


def build_default_tranches() -> list[Tranche]:
    """Build the seven payment tranches (EUR 248.000 in total)."""
    return [
        Tranche(
            id="t1",
            name="Voorschot Grondwerk",
            phase_id="voorbereiding",
            amount=15_000,
            unlock_task_ids=["bouwvergunning"],
            unlock_condition="Bouwvergunning verleend",
            required_action=DOCUMENT,
        ),
        Tranche(
            id="t2",
            name="Fundering Start",
            phase_id="fundering",
            amount=34_500,
            unlock_task_ids=["uitgraven-bouwput"],
            unlock_condition="Bouwput uitgegraven",
        ),
        Tranche(
            id="t3",
            name="Fundering Afronding",
            phase_id="fundering",
            amount=15_000,
            unlock_task_ids=["storten-fundering"],
            unlock_condition="Foto tijdens storten vereist",
            required_action=PHOTO,
        ),
        Tranche(
            id="t4",
            name="Ruwbouw Start",
            phase_id="ruwbouw",
            amount=45_000,
            unlock_task_ids=["uitharding"],
            unlock_condition="Start na uitharding fundering (28 dagen)",
        ),
        Tranche(
            id="t5",
            name="Ruwbouw Dak Dicht",
            phase_id="ruwbouw",
            amount=55_000,
            unlock_task_ids=["dakconstructie", "dakpannen"],
            unlock_condition="Dak geplaatst en gekeurd",
            required_action=INSPECTION,
        ),
        Tranche(
            id="t6",
            name="Installaties",
            phase_id="afbouw",
            amount=35_000,
            unlock_task_ids=["elektra-installatie", "leidingwerk"],
            unlock_condition="Leidingwerk geïnstalleerd",
        ),
        Tranche(
            id="t7",
            name="Afbouw & Oplevering",
            phase_id="oplevering",
            amount=48_500,
            unlock_task_ids=["eindcontrole", "sleuteloverdracht"],
            unlock_condition="Finale oplevering",
            required_action=INSPECTION,
        ),
    ]


# Demo progress: task id -> (verifier, completion date)
DEMO_COMPLETIONS: dict[str, tuple[str, datetime]] = {
    "grondonderzoek": ("Bureau Broersma", datetime(2025, 11, 15, tzinfo=UTC)),
    "bouwvergunning": ("Gemeente", datetime(2025, 11, 20, tzinfo=UTC)),
    "uitzetwerk": ("Landmeter", datetime(2025, 11, 22, tzinfo=UTC)),
    "uitgraven-bouwput": ("Bureau Broersma", datetime(2025, 11, 25, tzinfo=UTC)),
    "heipalen": ("Bureau Broersma", datetime(2025, 11, 26, tzinfo=UTC)),
    "wapeningsstaal": ("Bureau Broersma", datetime(2025, 11, 28, tzinfo=UTC)),
}

# Demo releases: tranche id -> release date
DEMO_RELEASES: dict[str, datetime] = {
    "t1": datetime(2025, 11, 21, tzinfo=UTC),
    "t2": datetime(2025, 11, 26, tzinfo=UTC),
}
