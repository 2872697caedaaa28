import math

import pytest

from kinestudy.particle import Particle


def make(index=0, px=0.0, py=0.0, pz=0.0, vx=0.0, vy=0.0, vz=0.0, status=-1, energy=1.0):
    return Particle(
        pdg=11, status=status, index=index, charge=-1, mass=0.000511,
        px=px, py=py, pz=pz, energy=energy,
        vx=vx, vy=vy, vz=vz, vt=0.5, beta=1.0, chi2pid=0.2,
    )


def test_momentum_magnitude():
    assert make(px=3.0, py=4.0, pz=12.0).p() == pytest.approx(13.0)


def test_vertex_transverse_distance():
    assert make(vx=3.0, vy=4.0, vz=7.0).r() == pytest.approx(5.0)


@pytest.mark.parametrize("px,py,pz", [(1.0, 2.0, 3.0), (-4.0, 0.5, -2.0), (0.1, -0.3, 9.0)])
def test_transverse_not_larger_than_total(px, py, pz):
    particle = make(px=px, py=py, pz=pz, vx=px, vy=py, vz=pz)
    assert particle.pt() <= particle.p()
    assert particle.r() <= particle.rho()


def test_phi_zero_when_no_transverse_momentum():
    assert make(pz=5.0).phi() == 0.0


@pytest.mark.parametrize("px,py", [(1.0, 1.0), (-1.0, 0.2), (-0.5, -3.0), (2.0, -0.1)])
def test_phi_within_range(px, py):
    assert -180.0 <= make(px=px, py=py, pz=1.0).phi() <= 180.0


def test_theta_is_right_angle_when_pz_zero():
    assert make(px=1.0).theta() == pytest.approx(90.0)


def test_theta_along_beam():
    assert make(pz=2.0).theta() == pytest.approx(0.0)
    assert make(pz=-2.0).theta() == pytest.approx(180.0)


def test_opening_angle():
    a = make(px=1.0, py=2.0, pz=3.0)
    b = make(px=-1.0, py=-2.0, pz=-3.0)
    assert a.opening_angle(a) == pytest.approx(0.0, abs=1e-7)
    assert a.opening_angle(b) == pytest.approx(math.pi)
    assert a.opening_angle(make()) == 0.0


def test_vectors():
    particle = make(px=1.0, py=2.0, pz=3.0, vx=4.0, vy=5.0, vz=6.0, energy=7.0)
    assert particle.momentum_vector() == (1.0, 2.0, 3.0)
    assert particle.four_momentum() == (1.0, 2.0, 3.0, 7.0)
    assert particle.vertex_vector() == (4.0, 5.0, 6.0)
    assert particle.vertex_four_vector() == (4.0, 5.0, 6.0, 0.5)


def test_identity_by_index():
    assert make(index=3, px=1.0) == make(index=3, px=9.0)
    assert make(index=3) != make(index=4)
    assert len({make(index=1), make(index=1, pz=2.0)}) == 1


def test_ordering_by_index():
    items = [make(index=5), make(index=1), make(index=3)]
    assert [p.index for p in sorted(items)] == [1, 3, 5]
    assert make(index=2) > make(index=1)


def test_str():
    text = str(make(index=2))
    assert text.startswith("(PDG: 11, Index: 2, Status: -1")