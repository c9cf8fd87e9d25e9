"""Component resolution: model + years + trims -> one flattened Motorcycle.

Resolution order for every field group:

    configuration component  ->  model component assignment  ->  legacy flat fields

Each tier is a small candidate function. ``_first_resolved`` evaluates the
candidates in priority order and keeps the first one that returns data, so
every tier can be tested on its own.

Best configuration selection:
- the configuration flagged ``is_default``
- else one whose engine has non-zero displacement or power
- else the first configuration in list order
- else None (the model has no trims)
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from ..core.enums import ComponentType, DataTier, MigrationStatus
from ..core.logging import log_error, log_transform, logger
from ..models.catalog import (
    ColorOption,
    Configuration,
    ModelComponentAssignment,
    ModelYear,
    MotorcycleModel,
)
from ..models.components import parse_component
from ..models.motorcycle import ComponentData, Motorcycle
from ..utils.converters import is_present, safe_float

ComponentIndex = dict[ComponentType, dict[str, Any]]


# =============================================================================
# FIELD GROUPS
# =============================================================================


@dataclass
class EngineFields:
    displacement_cc: float = 0
    power_hp: float = 0
    torque_nm: float = 0
    engine_type: Optional[str] = None
    cylinder_count: Optional[int] = None
    power_rpm: Optional[int] = None
    torque_rpm: Optional[int] = None
    cooling: Optional[str] = None
    fuel_system: Optional[str] = None


@dataclass
class BrakeFields:
    has_abs: bool = False
    brake_type: Optional[str] = None
    has_traction_control: bool = False


@dataclass
class DimensionFields:
    seat_height_mm: Optional[float] = None
    weight_kg: Optional[float] = None
    wheelbase_mm: Optional[float] = None
    fuel_capacity_l: Optional[float] = None
    ground_clearance_mm: Optional[float] = None

    def any_present(self) -> bool:
        return any(
            is_present(v)
            for v in (
                self.seat_height_mm,
                self.weight_kg,
                self.wheelbase_mm,
                self.fuel_capacity_l,
                self.ground_clearance_mm,
            )
        )


DIMENSION_KEYS = (
    "seat_height_mm",
    "weight_kg",
    "wheelbase_mm",
    "fuel_capacity_l",
    "ground_clearance_mm",
)


@dataclass
class FlatConfiguration:
    """A configuration tagged with the model year it belongs to."""

    configuration: Configuration
    model_year: ModelYear

    @property
    def year(self) -> int:
        return self.model_year.year


@dataclass
class ResolutionContext:
    """Everything a candidate resolver may look at."""

    model: MotorcycleModel
    flat: list[FlatConfiguration]
    selected: Optional[FlatConfiguration]
    components: dict[ComponentType, Any] = field(default_factory=dict)
    component_tiers: dict[ComponentType, DataTier] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


Candidate = Callable[[ResolutionContext], Optional[tuple[Any, DataTier]]]


# =============================================================================
# CONFIGURATION SELECTION
# =============================================================================


def flatten_configurations(model_years: Iterable[ModelYear]) -> list[FlatConfiguration]:
    """Flatten configurations across all years, keeping list order."""
    return [
        FlatConfiguration(configuration=config, model_year=year)
        for year in model_years
        for config in year.configurations
    ]


def select_best_configuration(
    flat: list[FlatConfiguration],
) -> Optional[FlatConfiguration]:
    """Pick the configuration whose data represents the model.

    Newer years are searched first; within a year list order is kept.
    """
    if not flat:
        return None
    ordered = sorted(flat, key=lambda item: item.year, reverse=True)
    for item in ordered:
        if item.configuration.is_default:
            return item
    # Rated power is the stronger signal, displacement alone still beats an empty trim
    for item in ordered:
        engine = item.configuration.engine
        if engine is not None and is_present(engine.power_hp):
            return item
    for item in ordered:
        engine = item.configuration.engine
        if engine is not None and engine.has_output:
            return item
    return ordered[0]


# =============================================================================
# COMPONENT INHERITANCE
# =============================================================================


def index_components(
    flat: list[FlatConfiguration],
    extra: Optional[ComponentIndex] = None,
) -> ComponentIndex:
    """Index every known component row by type and id.

    Rows joined onto configurations are included so that a model-level
    assignment can point at a component already fetched for a trim.
    """
    index: ComponentIndex = {ctype: {} for ctype in ComponentType}
    for item in flat:
        for ctype in ComponentType:
            row = item.configuration.component(ctype)
            if row is not None:
                index[ctype][row.id] = row
    for ctype, rows in (extra or {}).items():
        index[ctype].update(rows)
    return index


def resolve_component(
    component_type: ComponentType,
    configuration: Optional[Configuration],
    assignments: list[ModelComponentAssignment],
    index: ComponentIndex,
    year: Optional[int] = None,
) -> tuple[Any, DataTier]:
    """Resolve one component: configuration link, then model assignment."""
    if configuration is not None:
        row = configuration.component(component_type)
        if row is None:
            component_id = configuration.component_id(component_type)
            if component_id:
                row = index[component_type].get(component_id)
        if row is not None:
            return row, DataTier.CONFIGURATION

    candidates = [
        a
        for a in assignments
        if a.component_type == component_type and a.covers_year(year)
    ]
    # Defaults first, then insertion order
    candidates.sort(key=lambda a: not a.is_default)
    for assignment in candidates:
        row = index[component_type].get(assignment.component_id)
        if row is not None:
            return row, DataTier.MODEL_ASSIGNMENT

    return None, DataTier.NONE


# =============================================================================
# CANDIDATE RESOLVERS
# =============================================================================


def _first_resolved(
    candidates: list[Candidate], ctx: ResolutionContext
) -> tuple[Any, DataTier]:
    for candidate in candidates:
        result = candidate(ctx)
        if result is not None:
            return result
    raise LookupError("no candidate resolved")  # last candidate always resolves


def _legacy(model: MotorcycleModel, key: str) -> Any:
    value = getattr(model, key)
    return value if is_present(value) else None


def _or_legacy(value: Any, model: MotorcycleModel, key: str) -> Any:
    """Field-by-field fallback from a structured value to the model row."""
    return value if is_present(value) else _legacy(model, key)


def engine_from_component(ctx: ResolutionContext) -> Optional[tuple[EngineFields, DataTier]]:
    engine = ctx.components.get(ComponentType.ENGINE)
    if engine is None:
        return None
    model = ctx.model
    fields = EngineFields(
        displacement_cc=safe_float(_or_legacy(engine.displacement_cc, model, "engine_size")),
        power_hp=safe_float(_or_legacy(engine.power_hp, model, "horsepower")),
        torque_nm=safe_float(_or_legacy(engine.torque_nm, model, "torque_nm")),
        engine_type=engine.engine_type,
        cylinder_count=engine.cylinder_count,
        power_rpm=engine.power_rpm,
        torque_rpm=engine.torque_rpm,
        cooling=engine.cooling or model.cooling_system,
        fuel_system=engine.fuel_system,
    )
    return fields, ctx.component_tiers[ComponentType.ENGINE]


def _engine_legacy_fields(model: MotorcycleModel) -> Optional[EngineFields]:
    if not any(_legacy(model, k) for k in ("engine_size", "horsepower", "torque_nm")):
        return None
    return EngineFields(
        displacement_cc=safe_float(model.engine_size),
        power_hp=safe_float(model.horsepower),
        torque_nm=safe_float(model.torque_nm),
        cooling=model.cooling_system,
    )


def _note_dangling(ctx: ResolutionContext, component_type: ComponentType) -> bool:
    dangling = [
        item.configuration
        for item in ctx.flat
        if item.configuration.has_dangling_link(component_type)
    ]
    for config in dangling:
        message = (
            f"configuration {config.id} references {component_type.value} "
            f"{config.component_id(component_type)} but the row was not returned"
        )
        if message not in ctx.warnings:
            ctx.warnings.append(message)
            logger.warning(f"INTEGRITY {message}")
    return bool(dangling)


def engine_from_dangling_reference(
    ctx: ResolutionContext,
) -> Optional[tuple[EngineFields, DataTier]]:
    """A trim names an engine whose row is missing: use the model row."""
    if not _note_dangling(ctx, ComponentType.ENGINE):
        return None
    legacy = _engine_legacy_fields(ctx.model)
    return (legacy, DataTier.LEGACY) if legacy else None


def engine_from_legacy(ctx: ResolutionContext) -> Optional[tuple[EngineFields, DataTier]]:
    legacy = _engine_legacy_fields(ctx.model)
    return (legacy, DataTier.LEGACY) if legacy else None


def engine_defaults(ctx: ResolutionContext) -> tuple[EngineFields, DataTier]:
    return EngineFields(cooling=ctx.model.cooling_system), DataTier.NONE


ENGINE_CANDIDATES: list[Candidate] = [
    engine_from_component,
    engine_from_dangling_reference,
    engine_from_legacy,
    engine_defaults,
]


def brakes_from_component(ctx: ResolutionContext) -> Optional[tuple[BrakeFields, DataTier]]:
    brakes = ctx.components.get(ComponentType.BRAKE_SYSTEM)
    if brakes is None:
        return None
    has_abs = brakes.has_abs if brakes.has_abs is not None else bool(ctx.model.has_abs)
    fields = BrakeFields(
        has_abs=has_abs,
        brake_type=brakes.type or None,
        has_traction_control=bool(brakes.has_traction_control),
    )
    return fields, ctx.component_tiers[ComponentType.BRAKE_SYSTEM]


def brakes_from_dangling_reference(
    ctx: ResolutionContext,
) -> Optional[tuple[BrakeFields, DataTier]]:
    if not _note_dangling(ctx, ComponentType.BRAKE_SYSTEM):
        return None
    return brakes_from_legacy(ctx)


def brakes_from_legacy(ctx: ResolutionContext) -> Optional[tuple[BrakeFields, DataTier]]:
    if ctx.model.has_abs is None:
        return None
    return BrakeFields(has_abs=ctx.model.has_abs), DataTier.LEGACY


def brake_defaults(ctx: ResolutionContext) -> tuple[BrakeFields, DataTier]:
    return BrakeFields(), DataTier.NONE


BRAKE_CANDIDATES: list[Candidate] = [
    brakes_from_component,
    brakes_from_dangling_reference,
    brakes_from_legacy,
    brake_defaults,
]


def dimensions_from_configuration(
    ctx: ResolutionContext,
) -> Optional[tuple[DimensionFields, DataTier]]:
    if ctx.selected is None:
        return None
    config = ctx.selected.configuration
    own = DimensionFields(**{k: getattr(config, k) for k in DIMENSION_KEYS})
    if not own.any_present():
        return None
    frame = ctx.components.get(ComponentType.FRAME)
    model = ctx.model
    values = {k: _or_legacy(getattr(own, k), model, k) for k in DIMENSION_KEYS}
    if not is_present(own.wheelbase_mm) and frame is not None and is_present(frame.wheelbase_mm):
        values["wheelbase_mm"] = frame.wheelbase_mm
    return DimensionFields(**values), DataTier.CONFIGURATION


def dimensions_from_legacy(
    ctx: ResolutionContext,
) -> Optional[tuple[DimensionFields, DataTier]]:
    legacy = DimensionFields(**{k: _legacy(ctx.model, k) for k in DIMENSION_KEYS})
    frame = ctx.components.get(ComponentType.FRAME)
    if legacy.wheelbase_mm is None and frame is not None and is_present(frame.wheelbase_mm):
        legacy.wheelbase_mm = frame.wheelbase_mm
    if not legacy.any_present():
        return None
    return legacy, DataTier.LEGACY


def dimension_defaults(ctx: ResolutionContext) -> tuple[DimensionFields, DataTier]:
    return DimensionFields(), DataTier.NONE


DIMENSION_CANDIDATES: list[Candidate] = [
    dimensions_from_configuration,
    dimensions_from_legacy,
    dimension_defaults,
]


# =============================================================================
# CLASSIFICATION
# =============================================================================


def classify_migration(
    components: dict[ComponentType, Any],
    tiers: dict[str, DataTier],
) -> MigrationStatus:
    """Record which tier of the fallback chain supplied the data."""
    if any(row is not None for row in components.values()):
        return MigrationStatus.MIGRATED
    if any(tier in (DataTier.LEGACY, DataTier.CONFIGURATION) for tier in tiers.values()):
        return MigrationStatus.BASIC_DATA_ONLY
    return MigrationStatus.ERROR_FALLBACK


def is_placeholder_record(
    engine: EngineFields, dimensions: DimensionFields, has_configurations: bool
) -> bool:
    """A model without trims, or without displacement and dimensions, is a placeholder."""
    if not has_configurations:
        return True
    return not is_present(engine.displacement_cc) and not dimensions.any_present()


# =============================================================================
# TRANSFORM
# =============================================================================


def resolve_motorcycle(
    model: MotorcycleModel,
    model_years: list[ModelYear],
    assignments: Optional[list[ModelComponentAssignment]] = None,
    components: Optional[ComponentIndex] = None,
) -> Motorcycle:
    """Produce the flattened Motorcycle record for one model."""
    assignments = [a for a in (assignments or []) if a.model_id == model.id]
    flat = flatten_configurations(model_years)
    selected = select_best_configuration(flat)
    index = index_components(flat, components)

    selected_config = selected.configuration if selected else None
    selected_year = selected.year if selected else None

    ctx = ResolutionContext(model=model, flat=flat, selected=selected)
    for ctype in ComponentType:
        row, tier = resolve_component(ctype, selected_config, assignments, index, selected_year)
        ctx.components[ctype] = row
        ctx.component_tiers[ctype] = tier

    engine, engine_tier = _first_resolved(ENGINE_CANDIDATES, ctx)
    brakes, brake_tier = _first_resolved(BRAKE_CANDIDATES, ctx)
    dimensions, dimension_tier = _first_resolved(DIMENSION_CANDIDATES, ctx)

    tiers = {"engine": engine_tier, "brakes": brake_tier, "dimensions": dimension_tier}
    component_sources = {ctype.value: ctx.component_tiers[ctype] for ctype in ComponentType}

    latest = max(model_years, key=lambda y: y.year) if model_years else None
    year = selected_year or (latest.year if latest else model.production_start_year)

    image_url = (
        (selected_config.image_url if selected_config else None)
        or model.default_image_url
        or (selected.model_year.image_url if selected else None)
        or (latest.image_url if latest else None)
    )

    color_options: list[ColorOption] = [c for y in model_years for c in y.color_options]

    component_data = ComponentData(
        engine=ctx.components[ComponentType.ENGINE],
        brake_system=ctx.components[ComponentType.BRAKE_SYSTEM],
        frame=ctx.components[ComponentType.FRAME],
        suspension=ctx.components[ComponentType.SUSPENSION],
        wheel=ctx.components[ComponentType.WHEEL],
        selected_configuration=selected_config,
        selected_year=selected_year,
        configurations=[item.configuration for item in flat],
        color_options=color_options,
        sources=tiers,
        component_sources=component_sources,
        integrity_warnings=ctx.warnings,
    )

    status = classify_migration(ctx.components, tiers)
    placeholder = is_placeholder_record(engine, dimensions, bool(flat))

    motorcycle = Motorcycle(
        id=model.id,
        name=model.name,
        slug=model.slug,
        brand_id=model.brand_id,
        make=model.make,
        model=model.name,
        year=year,
        type=model.type,
        category=model.category or model.type,
        is_draft=model.is_draft,
        image_url=image_url,
        summary=model.summary or model.base_description,
        difficulty_level=model.difficulty_level,
        production_status=model.production_status,
        engine_size=engine.displacement_cc,
        horsepower=engine.power_hp,
        torque_nm=engine.torque_nm,
        engine_type=engine.engine_type,
        cylinder_count=engine.cylinder_count,
        power_rpm=engine.power_rpm,
        torque_rpm=engine.torque_rpm,
        cooling=engine.cooling,
        fuel_system=engine.fuel_system,
        has_abs=brakes.has_abs,
        brake_type=brakes.brake_type,
        has_traction_control=brakes.has_traction_control,
        seat_height_mm=dimensions.seat_height_mm,
        weight_kg=dimensions.weight_kg,
        wheelbase_mm=dimensions.wheelbase_mm,
        fuel_capacity_l=dimensions.fuel_capacity_l,
        ground_clearance_mm=dimensions.ground_clearance_mm,
        top_speed_kph=_legacy(model, "top_speed_kph"),
        is_placeholder=placeholder,
        migration_status=status,
        component_data=component_data,
    )

    log_transform(
        model.name,
        status.value,
        configurations=len(flat),
        selected=selected_config.display_name if selected_config else None,
        placeholder=placeholder,
    )
    return motorcycle


# =============================================================================
# SAFE BOUNDARY (raw rows in, never raises)
# =============================================================================


def fallback_motorcycle(row: Any) -> Motorcycle:
    """Minimal record for a model row that could not be resolved."""
    data = row if isinstance(row, dict) else {}
    brand = data.get("brand") or data.get("brands")
    make = brand.get("name") if isinstance(brand, dict) else None
    name = str(data.get("name") or "Unknown")
    return Motorcycle(
        id=str(data.get("id") or ""),
        name=name,
        slug=str(data.get("slug") or ""),
        brand_id=data.get("brand_id") if isinstance(data.get("brand_id"), str) else None,
        make=make or "Unknown",
        model=name,
        is_draft=bool(data.get("is_draft", False)),
        is_placeholder=True,
        migration_status=MigrationStatus.ERROR_FALLBACK,
    )


def resolve_motorcycle_row(
    row: dict[str, Any],
    assignments: Optional[list[dict[str, Any]]] = None,
    components: Optional[ComponentIndex] = None,
) -> Motorcycle:
    """Parse a nested ``motorcycle_models`` row and resolve it."""
    model = MotorcycleModel.model_validate(row)
    years = [ModelYear.model_validate(y) for y in (row.get("model_years") or [])]
    parsed_assignments = [
        ModelComponentAssignment.model_validate(a) for a in (assignments or [])
    ]
    return resolve_motorcycle(model, years, parsed_assignments, components)


def resolve_motorcycle_safe(
    row: dict[str, Any],
    assignments: Optional[list[dict[str, Any]]] = None,
    components: Optional[ComponentIndex] = None,
) -> Motorcycle:
    """Resolve a row; on any failure log it and return a fallback record."""
    try:
        return resolve_motorcycle_row(row, assignments, components)
    except Exception as e:
        name = row.get("name") if isinstance(row, dict) else None
        log_error("Motorcycle transform failed", e, model=name)
        return fallback_motorcycle(row)


def resolve_catalog(
    rows: list[dict[str, Any]],
    assignments: Optional[list[dict[str, Any]]] = None,
    components: Optional[ComponentIndex] = None,
) -> list[Motorcycle]:
    """Resolve a batch of model rows; one bad row never aborts the batch."""
    by_model: dict[str, list[dict[str, Any]]] = {}
    for a in assignments or []:
        if isinstance(a, dict) and a.get("model_id"):
            by_model.setdefault(str(a["model_id"]), []).append(a)

    motorcycles = []
    for row in rows:
        model_id = str(row.get("id")) if isinstance(row, dict) else ""
        motorcycles.append(
            resolve_motorcycle_safe(row, by_model.get(model_id, []), components)
        )
    return motorcycles


def build_component_index(
    rows_by_type: dict[ComponentType, list[dict[str, Any]]],
) -> ComponentIndex:
    """Parse fetched component rows into an index for model assignments."""
    index: ComponentIndex = {}
    for ctype, rows in rows_by_type.items():
        index[ctype] = {}
        for row in rows:
            try:
                component = parse_component(ctype, row)
            except Exception as e:
                log_error("Skipping malformed component", e, type=ctype.value, id=row.get("id"))
                continue
            index[ctype][component.id] = component
    return index
