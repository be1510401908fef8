"""Tests for node and arc consistency."""
import pytest

from calsched.errors import InvariantViolation
from calsched.models.comparison import Comparison
from calsched.models.constraints import BinaryDateConstraint, UnaryDateConstraint
from calsched.models.domain import MeetingDomain, build_domains
from calsched.solver.consistency import Arc, arc_consistency, make_arcs, node_consistency, revise


class TernaryConstraint:
    """Object pretending to be a constraint over three meetings."""
    arity = 3
    variables = (0, 1, 2)


class TestNodeConsistency:
    """Unary filtering."""

    def test_equality_pins_domain(self, days):
        domains = build_domains(2, days[0], days[2])
        removed = node_consistency(domains, [UnaryDateConstraint(0, Comparison.EQ, days[0])])
        assert removed == 2
        assert domains[0].sorted() == [days[0]]
        assert domains[1].sorted() == days

    def test_constraints_intersect(self, week):
        domains = build_domains(1, week[0], week[4])
        constraints = [
            UnaryDateConstraint(0, Comparison.GT, week[0]),
            UnaryDateConstraint(0, Comparison.LE, week[3]),
            UnaryDateConstraint(0, Comparison.NE, week[2]),
        ]
        node_consistency(domains, constraints)
        assert domains[0].sorted() == [week[1], week[3]]

    def test_order_does_not_matter(self, week):
        constraints = [
            UnaryDateConstraint(0, Comparison.GE, week[1]),
            UnaryDateConstraint(0, Comparison.LT, week[4]),
        ]
        forward = build_domains(1, week[0], week[4])
        backward = build_domains(1, week[0], week[4])
        node_consistency(forward, constraints)
        node_consistency(backward, list(reversed(constraints)))
        assert forward == backward

    def test_binary_constraints_ignored(self, days):
        domains = build_domains(2, days[0], days[2])
        removed = node_consistency(domains, [BinaryDateConstraint(0, Comparison.LT, 1)])
        assert removed == 0
        assert all(len(d) == 3 for d in domains)

    def test_reference_outside_window_empties_domain(self, days):
        domains = build_domains(1, days[0], days[2])
        node_consistency(domains, [UnaryDateConstraint(0, Comparison.LT, days[0])])
        assert domains[0].is_empty

    def test_idempotent(self, week):
        constraints = [UnaryDateConstraint(0, Comparison.NE, week[2])]
        domains = build_domains(1, week[0], week[4])
        node_consistency(domains, constraints)
        snapshot = [d.copy() for d in domains]
        assert node_consistency(domains, constraints) == 0
        assert domains == snapshot

    def test_unsupported_arity(self, days):
        with pytest.raises(InvariantViolation):
            node_consistency(build_domains(3, days[0], days[2]), [TernaryConstraint()])


class TestArcs:
    """Arc construction and revision."""

    def test_two_arcs_per_binary_constraint(self, days):
        c = BinaryDateConstraint(0, Comparison.LT, 1)
        arcs = make_arcs([c, UnaryDateConstraint(0, Comparison.EQ, days[0])])
        assert arcs == [Arc(0, 1, c), Arc(1, 0, c.reverse())]

    def test_arc_identity(self):
        c = BinaryDateConstraint(0, Comparison.NE, 1)
        assert Arc(0, 1, c) == Arc(0, 1, BinaryDateConstraint(0, Comparison.NE, 1))
        assert len({Arc(0, 1, c), Arc(0, 1, c), Arc(1, 0, c.reverse())}) == 2

    def test_revise_prunes_tail_only(self, days):
        domains = build_domains(2, days[0], days[2])
        arc = Arc(0, 1, BinaryDateConstraint(0, Comparison.LT, 1))
        removed = revise(arc, domains)
        assert removed == 1
        assert domains[0].sorted() == days[:2]
        assert domains[1].sorted() == days

    def test_revise_against_empty_head(self, days):
        domains = [MeetingDomain(days), MeetingDomain()]
        removed = revise(Arc(0, 1, BinaryDateConstraint(0, Comparison.NE, 1)), domains)
        assert removed == 3
        assert domains[0].is_empty


class TestArcConsistency:
    """AC-3 propagation."""

    def test_chain_propagates(self, days):
        # m0 < m1 < m2 over three days forces a unique assignment
        constraints = [
            BinaryDateConstraint(0, Comparison.LT, 1),
            BinaryDateConstraint(1, Comparison.LT, 2),
        ]
        domains = build_domains(3, days[0], days[2])
        revisions, removed = arc_consistency(domains, constraints)
        assert [d.sorted() for d in domains] == [[days[0]], [days[1]], [days[2]]]
        assert removed == 6
        assert revisions >= 6

    def test_requeue_after_shrink(self, days):
        # m0 pinned to D3 must push m1 (m1 < m0) and then m2 (m2 < m1)
        constraints = [
            UnaryDateConstraint(0, Comparison.EQ, days[2]),
            BinaryDateConstraint(1, Comparison.LT, 0),
            BinaryDateConstraint(2, Comparison.LT, 1),
        ]
        domains = build_domains(3, days[0], days[2])
        node_consistency(domains, constraints)
        arc_consistency(domains, constraints)
        assert domains[1].sorted() == [days[1]]
        assert domains[2].sorted() == [days[0]]

    def test_day_gap_propagates(self, week):
        # m1 exactly three days after m0 within Mon..Fri
        constraints = [BinaryDateConstraint(1, Comparison.EQ, 0, offset_days=3)]
        domains = build_domains(2, week[0], week[4])
        arc_consistency(domains, constraints)
        assert domains[0].sorted() == week[:2]
        assert domains[1].sorted() == week[3:]

    def test_empty_domain_is_not_an_error(self, days):
        constraints = [BinaryDateConstraint(0, Comparison.NE, 1)]
        domains = build_domains(2, days[0], days[0])
        arc_consistency(domains, constraints)
        assert domains[0].is_empty or domains[1].is_empty

    def test_fixed_point(self, week):
        constraints = [
            BinaryDateConstraint(0, Comparison.LT, 1),
            BinaryDateConstraint(2, Comparison.GE, 1, offset_days=2),
            BinaryDateConstraint(0, Comparison.NE, 2),
        ]
        domains = build_domains(3, week[0], week[4])
        arc_consistency(domains, constraints)
        snapshot = [d.copy() for d in domains]
        _, removed = arc_consistency(domains, constraints)
        assert removed == 0
        assert domains == snapshot

    def test_no_binary_constraints(self, days):
        domains = build_domains(2, days[0], days[2])
        assert arc_consistency(domains, []) == (0, 0)
