"""Tests for the seeded geometry generator."""

import math

import pytest

from semagram.engine.geometry import (
    MAX_RINGS,
    MIN_RINGS,
    SPOKE_CANDIDATES,
    choose_spokes,
    dash_pattern,
    generate_geometry,
    stroke_width,
)
from semagram.models.parameters import ParameterVector, Perspective
from tests.conftest import CAT_FIRST_ARC, CAT_LAST_ARC, CAT_SEED


def test_matches_reference_generator(params):
    g = generate_geometry(CAT_SEED, params, unit_count=3)
    assert g.ring_count == 6
    assert g.spokes == 7
    assert g.ring_gap == pytest.approx(28.814517637714744)
    assert g.rings[0][0].d == CAT_FIRST_ARC
    assert g.rings[0][0].width == pytest.approx(4.59826)
    assert g.rings[0][0].opacity == pytest.approx(0.6771409882884473)
    assert g.rings[-1][-1].d == CAT_LAST_ARC
    c = g.connectors[0][0]
    assert (c.x1, c.y1, c.x2, c.y2) == pytest.approx((99.994, 1.095, 128.807, 1.411))


def test_same_seed_same_geometry(bold_params):
    a = generate_geometry(424242, bold_params, 5)
    b = generate_geometry(424242, bold_params, 5)
    assert a == b
    assert a.to_dict() == b.to_dict()


def test_different_seed_different_geometry(params):
    a = generate_geometry(1, params, 3)
    b = generate_geometry(2, params, 3)
    assert [s.d for s in a.rings[0]] != [s.d for s in b.rings[0]]


def test_dict_roundtrip(bold_params):
    g = generate_geometry(77, bold_params, 9)
    assert type(g).from_dict(g.to_dict()) == g


@pytest.mark.parametrize("seed", [1, 2, 3, 1000, 2**31, 2**32 - 1])
@pytest.mark.parametrize("temporality", [0.0, 0.5, 1.0])
def test_ring_and_spoke_bounds(seed, temporality):
    g = generate_geometry(seed, ParameterVector(temporality=temporality), unit_count=seed % 40)
    assert MIN_RINGS <= g.ring_count <= MAX_RINGS
    assert g.spokes in SPOKE_CANDIDATES
    assert all(len(ring) == g.spokes for ring in g.rings)
    assert len(g.connectors) == g.ring_count - 1
    assert all(len(links) == g.spokes for links in g.connectors)


def test_temporality_adds_rings():
    low = [generate_geometry(s, ParameterVector(temporality=0.0)).ring_count for s in range(1, 60)]
    high = [generate_geometry(s, ParameterVector(temporality=1.0)).ring_count for s in range(1, 60)]
    assert max(low) <= 4
    assert min(high) >= 6
    assert sum(high) > sum(low)


def test_choose_spokes_scales_with_content():
    assert choose_spokes(1) == 7
    assert choose_spokes(6) == 9
    assert choose_spokes(9) == 11
    assert choose_spokes(100) == 19


def test_stroke_width_monotone_and_clamped():
    widths = [stroke_width(ParameterVector(certainty=c / 10), 0) for c in range(11)]
    assert widths == sorted(widths)
    emph = [stroke_width(ParameterVector(emphasis=e / 10), 0) for e in range(11)]
    assert emph == sorted(emph)
    top = stroke_width(ParameterVector(certainty=1.0, emphasis=1.0), 0)
    assert top <= 7.0
    assert stroke_width(ParameterVector(certainty=0.0, emphasis=0.0), 6) >= 0.8


def test_stroke_tapers_inward(params):
    assert stroke_width(params, 0) > stroke_width(params, 3) > stroke_width(params, 6)


def test_dash_lookup_covers_all_four_cases():
    solid = dash_pattern(ParameterVector())
    neg = dash_pattern(ParameterVector(negation=True))
    hyp = dash_pattern(ParameterVector(hypothetical=True))
    both = dash_pattern(ParameterVector(negation=True, hypothetical=True))
    assert solid is None
    assert len({neg, hyp, both}) == 3
    # Negation: longer dashes and gaps than the finer hypothetical profile
    assert float(neg.split()[0]) > float(hyp.split()[0])
    assert float(neg.split()[1]) > float(hyp.split()[1])


def test_dash_applied_to_every_segment():
    g = generate_geometry(5, ParameterVector(hypothetical=True))
    assert all(seg.dash for ring in g.rings for seg in ring)


def test_perspective_rotates_start_angles():
    def start_angle(p):
        d = generate_geometry(11, ParameterVector(perspective=p)).rings[0][0].d
        _, x, y = d.split()[:3]
        return math.atan2(float(y), float(x))

    first = start_angle(Perspective.FIRST)
    assert start_angle(Perspective.SECOND) - first == pytest.approx(0.12, abs=1e-3)
    assert start_angle(Perspective.THIRD) - first == pytest.approx(-0.12, abs=1e-3)


def test_halo_only_for_non_neutral_perspective():
    assert generate_geometry(3, ParameterVector(perspective=Perspective.FIRST)).center.halo_radius is None
    assert generate_geometry(3, ParameterVector(perspective=Perspective.SECOND)).center.halo_radius is not None


def test_agency_drives_center_and_opacity():
    weak = generate_geometry(8, ParameterVector(agency=0.0))
    strong = generate_geometry(8, ParameterVector(agency=1.0))
    assert strong.center.radius > weak.center.radius
    assert strong.center.opacity > weak.center.opacity
    weak_op = sum(s.opacity for r in weak.rings for s in r)
    strong_op = sum(s.opacity for r in strong.rings for s in r)
    assert strong_op > weak_op
    assert all(0.45 <= s.opacity <= 1.0 for r in strong.rings for s in r)


def test_modality_shifts_ring_start():
    def start_y(m):
        d = generate_geometry(21, ParameterVector(modality=m)).rings[0][0].d
        return float(d.split()[2])

    # Same jitter draws; larger bias means a larger start angle
    assert start_y(1.0) > start_y(0.0)
