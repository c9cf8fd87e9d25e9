"""Tests for component resolution and the motorcycle transform."""

from conftest import (
    brake_row,
    configuration_row,
    engine_row,
    model_row,
    ninja_row,
    year_row,
)

from wrenchmark.core.enums import ComponentType, DataTier, MigrationStatus
from wrenchmark.models import (
    Configuration,
    ModelComponentAssignment,
    ModelYear,
    MotorcycleModel,
)
from wrenchmark.services.resolver import (
    FlatConfiguration,
    build_component_index,
    flatten_configurations,
    resolve_catalog,
    resolve_component,
    resolve_motorcycle_row,
    resolve_motorcycle_safe,
    select_best_configuration,
)


def _flat(*configs: dict) -> list[FlatConfiguration]:
    year = ModelYear.model_validate(year_row("yr-1", "mdl-1", 2024, list(configs)))
    return flatten_configurations([year])


# ---------------------------------------------------------------------------
# Configuration selection
# ---------------------------------------------------------------------------


class TestSelectBestConfiguration:
    def test_default_wins_over_engine_linked(self):
        flat = _flat(
            configuration_row("a", "yr-1", engine_id="e", engine=engine_row(id="e")),
            configuration_row("b", "yr-1", is_default=True),
        )
        assert select_best_configuration(flat).configuration.id == "b"

    def test_prefers_powered_engine_without_default(self):
        flat = _flat(
            configuration_row("empty", "yr-1"),
            configuration_row(
                "cc-only",
                "yr-1",
                engine_id="e1",
                engine=engine_row(id="e1", power_hp=None, displacement_cc=400),
            ),
            configuration_row("powered", "yr-1", engine_id="e2", engine=engine_row(id="e2")),
        )
        assert select_best_configuration(flat).configuration.id == "powered"

    def test_displacement_beats_empty_trim(self):
        flat = _flat(
            configuration_row("empty", "yr-1"),
            configuration_row(
                "cc-only",
                "yr-1",
                engine_id="e1",
                engine=engine_row(id="e1", power_hp=0, displacement_cc=400),
            ),
        )
        assert select_best_configuration(flat).configuration.id == "cc-only"

    def test_first_in_list_order_as_last_resort(self):
        flat = _flat(configuration_row("x", "yr-1"), configuration_row("y", "yr-1"))
        assert select_best_configuration(flat).configuration.id == "x"

    def test_no_configurations(self):
        assert select_best_configuration([]) is None

    def test_latest_year_default_wins_over_older_default(self):
        older = ModelYear.model_validate(
            year_row(
                "yr-2022",
                "mdl-1",
                2022,
                [configuration_row("old", "yr-2022", is_default=True)],
            )
        )
        newer = ModelYear.model_validate(
            year_row(
                "yr-2024",
                "mdl-1",
                2024,
                [configuration_row("new", "yr-2024", is_default=True)],
            )
        )
        selected = select_best_configuration(flatten_configurations([older, newer]))
        assert selected.configuration.id == "new"
        assert selected.year == 2024

    def test_fallback_prefers_latest_year(self):
        older = ModelYear.model_validate(
            year_row("yr-2022", "mdl-1", 2022, [configuration_row("old", "yr-2022")])
        )
        newer = ModelYear.model_validate(
            year_row("yr-2024", "mdl-1", 2024, [configuration_row("new", "yr-2024")])
        )
        selected = select_best_configuration(flatten_configurations([older, newer]))
        assert selected.configuration.id == "new"


# ---------------------------------------------------------------------------
# Component inheritance
# ---------------------------------------------------------------------------


class TestResolveComponent:
    def _index(self):
        return build_component_index(
            {
                ComponentType.ENGINE: [engine_row(id="model-engine", displacement_cc=700)],
                ComponentType.BRAKE_SYSTEM: [brake_row()],
            }
        )

    def test_configuration_link_wins(self):
        config = Configuration.model_validate(
            configuration_row("c", "y", engine_id="eng-649", engine=engine_row())
        )
        assignment = ModelComponentAssignment(
            model_id="m", component_type="engine", component_id="model-engine"
        )
        row, tier = resolve_component(
            ComponentType.ENGINE, config, [assignment], self._index(), 2024
        )
        assert row.id == "eng-649"
        assert tier == DataTier.CONFIGURATION

    def test_falls_back_to_model_assignment(self):
        config = Configuration.model_validate(configuration_row("c", "y"))
        assignment = ModelComponentAssignment(
            model_id="m", component_type="engines", component_id="model-engine"
        )
        row, tier = resolve_component(
            ComponentType.ENGINE, config, [assignment], self._index(), 2024
        )
        assert row.id == "model-engine"
        assert tier == DataTier.MODEL_ASSIGNMENT

    def test_assignment_outside_effective_years_is_ignored(self):
        assignment = ModelComponentAssignment(
            model_id="m",
            component_type="engine",
            component_id="model-engine",
            effective_from_year=2020,
            effective_to_year=2022,
        )
        row, tier = resolve_component(ComponentType.ENGINE, None, [assignment], self._index(), 2024)
        assert row is None
        assert tier == DataTier.NONE

    def test_linked_id_found_in_index(self):
        config = Configuration.model_validate(
            configuration_row("c", "y", brake_system_id="brk-1")
        )
        row, tier = resolve_component(ComponentType.BRAKE_SYSTEM, config, [], self._index())
        assert row.id == "brk-1"
        assert tier == DataTier.CONFIGURATION


# ---------------------------------------------------------------------------
# Full transform
# ---------------------------------------------------------------------------


class TestResolveMotorcycle:
    def test_ninja_default_without_engine_uses_legacy_displacement(self):
        moto = resolve_motorcycle_row(ninja_row(engine_size=649, horsepower=67))
        assert moto.component_data.selected_configuration.name == "Base"
        assert moto.engine_size == 649
        assert moto.horsepower == 67
        assert moto.is_placeholder is False
        assert moto.migration_status == MigrationStatus.BASIC_DATA_ONLY
        assert moto.component_data.sources["engine"] == DataTier.LEGACY

    def test_ninja_without_legacy_fields_is_placeholder(self):
        moto = resolve_motorcycle_row(ninja_row())
        assert moto.component_data.selected_configuration.name == "Base"
        assert moto.engine_size == 0
        assert moto.is_placeholder is True

    def test_linked_engine_beats_legacy_fields(self):
        config = configuration_row(
            "c", "yr-1", is_default=True, engine_id="eng-649", engine=engine_row()
        )
        row = model_row("mdl-1", [year_row("yr-1", "mdl-1", 2024, [config])],
                        engine_size=999, horsepower=150)
        moto = resolve_motorcycle_row(row)
        assert moto.engine_size == 649
        assert moto.horsepower == 67
        assert moto.migration_status == MigrationStatus.MIGRATED

    def test_missing_component_fields_fill_from_legacy(self):
        config = configuration_row(
            "c",
            "yr-1",
            engine_id="e",
            engine=engine_row(id="e", power_hp=None, torque_nm=None),
        )
        row = model_row("mdl-1", [year_row("yr-1", "mdl-1", 2024, [config])],
                        horsepower=70, torque_nm=60)
        moto = resolve_motorcycle_row(row)
        assert moto.engine_size == 649
        assert moto.horsepower == 70
        assert moto.torque_nm == 60

    def test_zero_configurations_is_placeholder(self):
        moto = resolve_motorcycle_row(model_row("mdl-1", [], engine_size=650))
        assert moto.is_placeholder is True
        assert moto.year == 2017
        assert moto.component_data.selected_configuration is None

    def test_no_data_anywhere_is_never_migrated(self):
        config = configuration_row("c", "yr-1")
        moto = resolve_motorcycle_row(
            model_row("mdl-1", [year_row("yr-1", "mdl-1", 2024, [config])])
        )
        assert moto.migration_status in (
            MigrationStatus.ERROR_FALLBACK,
            MigrationStatus.BASIC_DATA_ONLY,
        )
        assert moto.migration_status == MigrationStatus.ERROR_FALLBACK

    def test_model_assignment_supplies_engine(self):
        config = configuration_row("c", "yr-1", is_default=True)
        row = model_row("mdl-1", [year_row("yr-1", "mdl-1", 2024, [config])])
        assignments = [
            {"model_id": "mdl-1", "component_type": "engine", "component_id": "eng-689"}
        ]
        index = build_component_index(
            {ComponentType.ENGINE: [engine_row(id="eng-689", displacement_cc=689)]}
        )
        moto = resolve_motorcycle_row(row, assignments, index)
        assert moto.engine_size == 689
        assert moto.component_data.sources["engine"] == DataTier.MODEL_ASSIGNMENT
        assert moto.migration_status == MigrationStatus.MIGRATED

    def test_configuration_dimensions_and_abs(self):
        moto = resolve_motorcycle_row(
            model_row(
                "mdl-1",
                [
                    year_row(
                        "yr-1",
                        "mdl-1",
                        2024,
                        [
                            configuration_row(
                                "c",
                                "yr-1",
                                is_default=True,
                                brake_system_id="brk-1",
                                brake_system=brake_row(),
                                seat_height_mm=790,
                                weight_kg=193,
                            )
                        ],
                    )
                ],
                wheelbase_mm=1410,
            )
        )
        assert moto.has_abs is True
        assert moto.seat_height_mm == 790
        assert moto.weight_kg == 193
        assert moto.wheelbase_mm == 1410
        assert moto.seat_height_in == 31.1
        assert moto.weight_lbs == 425.5

    def test_latest_year_and_year_of_selected_trim(self):
        older = year_row("yr-old", "mdl-1", 2022, [configuration_row("old", "yr-old")])
        newer = year_row(
            "yr-new", "mdl-1", 2024, [configuration_row("new", "yr-new", is_default=True)]
        )
        moto = resolve_motorcycle_row(model_row("mdl-1", [older, newer]))
        assert moto.year == 2024
        assert moto.component_data.selected_year == 2024
        assert len(moto.component_data.configurations) == 2

    def test_specs_come_from_latest_default_trim(self):
        older = year_row(
            "yr-2022",
            "mdl-1",
            2022,
            [
                configuration_row(
                    "old", "yr-2022", is_default=True, engine_id="eng-649", engine=engine_row()
                )
            ],
        )
        newer = year_row(
            "yr-2024",
            "mdl-1",
            2024,
            [
                configuration_row(
                    "new",
                    "yr-2024",
                    is_default=True,
                    engine_id="eng-689",
                    engine=engine_row(id="eng-689", displacement_cc=689, power_hp=73),
                )
            ],
        )
        moto = resolve_motorcycle_row(model_row("mdl-1", [older, newer]))
        assert moto.component_data.selected_year == 2024
        assert moto.engine_size == 689

    def test_serializes_component_data_alias(self):
        moto = resolve_motorcycle_row(ninja_row(engine_size=649))
        data = moto.model_dump(by_alias=True)
        assert "_componentData" in data
        assert data["_componentData"]["selected_configuration"]["name"] == "Base"


class TestDanglingLinks:
    def test_dangling_engine_link_falls_back_and_warns(self):
        config = configuration_row("c", "yr-1", is_default=True, engine_id="eng-gone")
        row = model_row("mdl-1", [year_row("yr-1", "mdl-1", 2024, [config])], engine_size=650)
        moto = resolve_motorcycle_row(row)
        assert moto.engine_size == 650
        warnings = moto.component_data.integrity_warnings
        assert len(warnings) == 1
        assert "eng-gone" in warnings[0]

    def test_linked_row_joined_on_sibling_trim_is_used(self):
        sibling = configuration_row("s", "yr-1", engine_id="eng-649", engine=engine_row())
        config = configuration_row("c", "yr-1", is_default=True, engine_id="eng-649")
        row = model_row("mdl-1", [year_row("yr-1", "mdl-1", 2024, [config, sibling])])
        moto = resolve_motorcycle_row(row)
        assert moto.engine_size == 649
        assert moto.component_data.integrity_warnings == []


class TestSafeBoundary:
    def test_malformed_row_returns_fallback(self):
        moto = resolve_motorcycle_safe({"id": "bad", "name": "Broken", "model_years": "nope"})
        assert moto.migration_status == MigrationStatus.ERROR_FALLBACK
        assert moto.is_placeholder is True
        assert moto.name == "Broken"

    def test_one_bad_row_does_not_abort_catalog(self):
        rows = [ninja_row(engine_size=649), {"id": "bad"}]
        motorcycles = resolve_catalog(rows)
        assert len(motorcycles) == 2
        assert motorcycles[0].engine_size == 649
        assert motorcycles[1].migration_status == MigrationStatus.ERROR_FALLBACK

    def test_catalog_routes_assignments_to_their_model(self):
        other = model_row("mdl-2", [], name="Other", slug="other")
        assignments = [
            {"model_id": "mdl-2", "component_type": "engine", "component_id": "eng-649"}
        ]
        index = build_component_index({ComponentType.ENGINE: [engine_row()]})
        ninja, resolved_other = resolve_catalog([ninja_row(), other], assignments, index)
        assert ninja.engine_size == 0
        assert resolved_other.engine_size == 649

    def test_legacy_plural_join_keys(self):
        config = configuration_row("c", "yr-1", is_default=True, engine_id="eng-649")
        config["engines"] = engine_row()
        del config["engine"]
        moto = resolve_motorcycle_row(
            model_row("mdl-1", [year_row("yr-1", "mdl-1", 2024, [config])])
        )
        assert moto.engine_size == 649


class TestModels:
    def test_model_accepts_plural_brand_key(self):
        row = model_row()
        row["brands"] = row.pop("brand")
        assert MotorcycleModel.model_validate(row).make == "Kawasaki"
