from __future__ import annotations

from sectionlint.classify import classify_all
from sectionlint.extract import extract_declarations
from sectionlint.graph import build_section_graphs
from sectionlint.model import LintOptions, Severity, ViolationKind
from sectionlint.taxonomy import Section
from sectionlint.validate import Validation, validate
from tests.unit_builders import function, hook, render, state, stmt, value, widget


def _validate(unit, options: LintOptions | None = None) -> Validation:
    options = options or LintOptions()
    extraction = extract_declarations(unit, props_type_names=options.props_type_names)
    classifications = classify_all(extraction.declarations)
    graphs = build_section_graphs(extraction.declarations, classifications)
    return validate(extraction.declarations, classifications, graphs, options)


def _kinds(validation: Validation) -> list[tuple[ViolationKind, str]]:
    return [(v.kind, v.declaration_name) for v in validation.violations]


def test_compliant_unit_has_no_violations() -> None:
    unit = widget(
        [
            state("amount"),
            state("zIndex"),
            hook("useRef", "inputRef"),
            function("getTotal", reads=("amount",)),
            hook("useEffect"),
            render(reads=("getTotal",)),
        ],
        before=[
            stmt("import", text='import React from "react";', module="react"),
            stmt("type_alias", "Row", text="type Row = {};"),
            stmt("interface", "WidgetProps", text="interface WidgetProps {}"),
        ],
        after=[stmt("export", text="export default Widget;", target="default")],
    )
    validation = _validate(unit)
    assert validation.violations == ()
    assert validation.order == list(range(len(validation.order)))
    assert validation.resorted_sections == frozenset()


def test_alphabetical_descent_is_reported_on_the_later_declaration() -> None:
    validation = _validate(widget([state("zIndex"), state("amount"), render()]))
    assert _kinds(validation) == [(ViolationKind.ALPHABETICAL_ORDER, "amount")]
    violation = validation.violations[0]
    assert violation.section is Section.STATE
    assert violation.actual_position == 2
    assert violation.expected_position == 1
    assert violation.related == ("zIndex",)
    assert violation.severity is Severity.WARNING
    assert violation.fixable
    assert validation.order == [0, 2, 1, 3]
    assert validation.resorted_sections == frozenset({Section.STATE})


def test_alphabetical_comparison_is_case_insensitive() -> None:
    validation = _validate(widget([state("Beta"), state("alpha"), state("ALPHA"), render()]))
    assert _kinds(validation) == [(ViolationKind.ALPHABETICAL_ORDER, "alpha")]


def test_declaration_after_a_later_section_is_out_of_order() -> None:
    validation = _validate(
        widget(
            [
                state("count"),
                function("getTotal", reads=("count",)),
                hook("useRef", "inputRef"),
                render(),
            ]
        )
    )
    assert _kinds(validation) == [(ViolationKind.SECTION_ORDER, "inputRef")]
    violation = validation.violations[0]
    assert violation.section is Section.REFS
    assert violation.related == (Section.FUNCTIONS.value,)
    assert violation.actual_position == 3
    assert violation.expected_position == 2
    assert validation.order == [0, 1, 3, 2, 4]


def test_dependency_declared_after_its_dependent() -> None:
    validation = _validate(
        widget([function("getA", reads=("getB",)), function("getB"), render()])
    )
    assert _kinds(validation) == [(ViolationKind.ALPHABETICAL_ORDER, "getB")]
    violation = validation.violations[0]
    assert "reads it" in violation.message
    assert violation.expected_position == 1
    assert validation.order == [0, 2, 1, 3]


def test_dependency_order_beats_alphabetical_order() -> None:
    validation = _validate(
        widget([function("getZ"), function("getA", reads=("getZ",)), render()])
    )
    assert validation.violations == ()


def test_cycle_is_reported_and_section_left_alone() -> None:
    validation = _validate(
        widget(
            [
                function("getY", reads=("getX",)),
                function("getX", reads=("getY",)),
                render(),
            ]
        )
    )
    assert _kinds(validation) == [(ViolationKind.DEPENDENCY_CYCLE, "getY")]
    violation = validation.violations[0]
    assert violation.related == ("getX", "getY")
    assert violation.severity is Severity.ERROR
    assert not violation.fixable
    assert validation.cyclic_sections == frozenset({Section.FUNCTIONS})
    assert validation.order == [0, 1, 2, 3]


def test_props_type_must_be_last_of_its_section() -> None:
    unit = widget(
        [render()],
        before=[
            stmt("type_alias", "Props", text="type Props = {};"),
            stmt("type_alias", "Row", text="type Row = {};"),
        ],
    )
    validation = _validate(unit)
    assert _kinds(validation) == [(ViolationKind.PROPS_INTERFACE_POSITION, "Props")]
    violation = validation.violations[0]
    assert violation.actual_position == 0
    assert violation.expected_position == 1
    assert validation.order == [1, 0, 2, 3]


def test_naming_conventions() -> None:
    unit = widget(
        [
            value("open", boolean=True),
            value("label"),
            function("format"),
            stmt("variable", "onSave", text="const onSave = () => {};", value="function"),
            hook("useCallback", "save"),
            render(),
        ]
    )
    validation = _validate(unit)
    naming = {
        v.declaration_name: v
        for v in validation.violations
        if v.kind is ViolationKind.NAMING_CONVENTION
    }
    assert set(naming) == {"open", "format", "onSave", "save"}
    assert "'is' or 'has'" in naming["open"].message
    assert "reserved for props" in naming["onSave"].message
    assert "'handle'" in naming["save"].message
    assert all(v.severity is Severity.HINT and not v.fixable for v in naming.values())

    quiet = _validate(unit, LintOptions(naming_checks_enabled=False))
    assert not any(v.kind is ViolationKind.NAMING_CONVENTION for v in quiet.violations)


def test_enum_members_out_of_order_are_not_fixable() -> None:
    unit = widget(
        [render()],
        before=[stmt("enum", "Mode", text="enum Mode { View, Edit }", members=["View", "Edit"])],
    )
    validation = _validate(unit)
    assert _kinds(validation) == [(ViolationKind.ALPHABETICAL_ORDER, "Mode")]
    violation = validation.violations[0]
    assert violation.related == ("View", "Edit")
    assert not violation.fixable
    assert validation.order == [0, 1, 2]


def test_import_specifiers_out_of_order() -> None:
    unit = widget(
        [render()],
        before=[
            stmt(
                "import",
                text='import { useState, useEffect } from "react";',
                module="react",
                specifiers=["useState", "useEffect"],
            )
        ],
    )
    validation = _validate(unit)
    assert _kinds(validation) == [(ViolationKind.ALPHABETICAL_ORDER, "react")]
    assert validation.violations[0].message.startswith("specifier 'useEffect'")
    assert not validation.violations[0].fixable


def test_unclassified_statements_are_informational() -> None:
    unit = widget(
        [
            state("count"),
            stmt("expression", text="console.log(count);", reads=("count",), callee="console.log"),
            render(),
        ]
    )
    validation = _validate(unit)
    assert [v.kind for v in validation.violations] == [ViolationKind.UNCLASSIFIED]
    assert validation.violations[0].severity is Severity.INFO
    assert validation.violations[0].section is Section.UNCLASSIFIED


def test_custom_section_order() -> None:
    options = LintOptions(section_order=("refs", "state"))
    unit = widget([hook("useRef", "inputRef"), state("count"), render()])
    assert _validate(unit, options).violations == ()
    default = _validate(unit)
    assert _kinds(default) == [(ViolationKind.SECTION_ORDER, "count")]


def test_violations_are_sorted_by_position() -> None:
    unit = widget(
        [
            state("zIndex"),
            state("amount"),
            function("format"),
            hook("useRef", "inputRef"),
            render(),
        ]
    )
    validation = _validate(unit)
    positions = [v.actual_position for v in validation.violations]
    assert positions == sorted(positions)
    assert _kinds(validation) == [
        (ViolationKind.ALPHABETICAL_ORDER, "amount"),
        (ViolationKind.NAMING_CONVENTION, "format"),
        (ViolationKind.SECTION_ORDER, "inputRef"),
    ]


def test_props_type_last_is_not_an_alphabetical_violation() -> None:
    unit = widget(
        [render()],
        before=[
            stmt("interface", "Row", text="interface Row {}"),
            stmt("interface", "Props", text="interface Props {}"),
        ],
    )
    validation = _validate(unit)
    assert validation.violations == ()
    assert validation.order == [0, 1, 2, 3]


def test_callback_reading_a_later_function() -> None:
    unit = widget(
        [
            hook("useCallback", "handleSubmit", reads=("getTotal",)),
            function("getTotal"),
            render(),
        ]
    )
    validation = _validate(unit)
    assert _kinds(validation) == [(ViolationKind.SECTION_ORDER, "getTotal")]
    violation = validation.violations[0]
    assert violation.section is Section.FUNCTIONS
    assert violation.related == (Section.CALLBACKS.value,)
    assert violation.expected_position == 1
    assert violation.actual_position == 2
    assert validation.order == [0, 2, 1, 3]


def test_alphabetical_pairs_stay_within_one_container() -> None:
    unit = widget(
        [
            stmt(
                "variable",
                "alpha",
                text="const alpha = 1;",
                value="literal",
                comment="// Constants",
            ),
            render(),
        ],
        before=[stmt("variable", "ZETA", text="const ZETA = 1;", value="literal")],
    )
    validation = _validate(unit)
    assert validation.violations == ()
    assert validation.resorted_sections == frozenset()
