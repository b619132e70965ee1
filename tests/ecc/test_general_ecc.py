from dataclasses import dataclass

import pytest
from ecpy.curves import Point as CurvePoint

from zkecc.circuit.region import ConstraintSystem, RegionCtx
from zkecc.curves import BN254_SCALAR_MODULUS, secp256k1, secp256r1
from zkecc.ecc.general_ecc import GeneralEccChip
from zkecc.ecc.point import AssignedPoint, MulAux, Selector, Table
from zkecc.errors import SynthesisError
from zkecc.integer.rns import Integer, Range
from zkecc.util.ecc_params import EccConfig


@dataclass
class Secp256k1:
    curve = secp256k1
    P = 0x4F3C7A1D2E8B9061C5A7D3E2F1B0A9C8D7E6F5A4B3C2D1E0F9A8B7C6D5E4F3A2 * secp256k1.generator
    Q = 0x1D2C3B4A59687766554433221100FFEEDDCCBBAA99887766554433221100AABB * secp256k1.generator
    aux_generator = 0x6A09E667F3BCC908B2FB1366EA957D3E3ADEC17512775099DA2F590B0667322A * secp256k1.generator
    scalar = 0x243F6A8885A308D313198A2E03707344A4093822299F31D0082EFA98EC4E6C89
    filename = "secp256k1"


@dataclass
class Secp256r1:
    curve = secp256r1
    P = 0x4F3C7A1D2E8B9061C5A7D3E2F1B0A9C8D7E6F5A4B3C2D1E0F9A8B7C6D5E4F3A2 * secp256r1.generator
    Q = 0x1D2C3B4A59687766554433221100FFEEDDCCBBAA99887766554433221100AABB * secp256r1.generator
    aux_generator = 0x6A09E667F3BCC908B2FB1366EA957D3E3ADEC17512775099DA2F590B0667322A * secp256r1.generator
    scalar = 0x243F6A8885A308D313198A2E03707344A4093822299F31D0082EFA98EC4E6C89
    filename = "secp256r1"


configurations = [Secp256k1, Secp256r1]


def make_context(config, instance=None):
    chip = GeneralEccChip(config.curve, BN254_SCALAR_MODULUS)
    cs = ConstraintSystem(BN254_SCALAR_MODULUS, instance=instance or [])
    return chip, cs, RegionCtx(cs.assign_region("ecc"))


def coordinates(point):
    return point.x, point.y


def chip_public(config, point):
    return GeneralEccChip(config.curve, BN254_SCALAR_MODULUS).to_point(point).public()


@pytest.mark.parametrize("config", configurations)
def test_add(config, save_layout):
    expected = config.P + config.Q
    chip, cs, ctx = make_context(config, instance=chip_public(config, expected))

    result = chip.add(ctx, chip.assign_point(ctx, config.P), chip.assign_point(ctx, config.Q))
    chip.expose_public(cs, result, 0)

    assert result.coordinates() == coordinates(expected)
    assert cs.verify() == []

    save_layout(cs, "ecc", config.filename, "add")


@pytest.mark.parametrize("config", configurations)
@pytest.mark.parametrize("opposite", [False, True])
def test_add_rejects_equal_x(config, opposite):
    chip, cs, ctx = make_context(config)
    other = -config.P if opposite else config.P

    chip.add(ctx, chip.assign_point(ctx, config.P), chip.assign_point(ctx, other))

    failures = cs.verify()
    assert any(failure.constraint == "assert_not_zero" for failure in failures)


@pytest.mark.parametrize("config", configurations)
def test_double(config, save_layout):
    expected = 2 * config.P
    chip, cs, ctx = make_context(config, instance=chip_public(config, expected))

    result = chip.double(ctx, chip.assign_point(ctx, config.P))
    chip.expose_public(cs, result, 0)

    assert result.coordinates() == coordinates(expected)
    assert cs.verify() == []

    save_layout(cs, "ecc", config.filename, "double")


@pytest.mark.parametrize("config", configurations)
def test_double_n(config):
    chip, cs, ctx = make_context(config)

    result = chip.double_n(ctx, chip.assign_point(ctx, config.P), 3)

    assert result.coordinates() == coordinates(8 * config.P)
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
def test_ladder(config):
    chip, cs, ctx = make_context(config)

    result = chip.ladder(ctx, chip.assign_point(ctx, config.P), chip.assign_point(ctx, config.Q))

    assert result.coordinates() == coordinates(2 * config.P + config.Q)
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
def test_neg(config):
    chip, cs, ctx = make_context(config)

    result = chip.neg(ctx, chip.assign_point(ctx, config.P))

    assert result.coordinates() == coordinates(-config.P)
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
@pytest.mark.parametrize("cond", [0, 1])
def test_select(config, cond):
    chip, cs, ctx = make_context(config)
    p = chip.assign_point(ctx, config.P)
    q = chip.assign_point(ctx, config.Q)
    c = chip.main_gate.assign_bit(ctx, cond)

    assert chip.select(ctx, c, p, q).coordinates() == coordinates(config.P if cond else config.Q)
    assert chip.select_or_assign(ctx, c, p, config.Q).coordinates() == coordinates(config.P if cond else config.Q)
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
def test_assign_constant(config):
    chip, cs, ctx = make_context(config)

    point = chip.assign_constant(ctx, config.P)
    chip.assert_is_on_curve(ctx, point)

    assert point.coordinates() == coordinates(config.P)
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
@pytest.mark.parametrize(("same", "satisfied"), [(True, True), (False, False)])
def test_assert_equal(config, same, satisfied):
    chip, cs, ctx = make_context(config)
    p = chip.assign_point(ctx, config.P)
    q = chip.assign_point(ctx, config.P if same else config.Q)

    chip.assert_equal(ctx, p, q)

    assert (cs.verify() == []) == satisfied


@pytest.mark.parametrize("config", configurations)
def test_normalize(config):
    chip, cs, ctx = make_context(config)
    p = chip.assign_point(ctx, config.P)
    zero = chip.integer_chip.range_assign_integer(ctx, Integer(0, chip.rns), Range.REMAINDER)
    unreduced_y = chip.integer_chip.sub(ctx, p.y, zero)

    normalized = chip.normalize(ctx, AssignedPoint(p.x, unreduced_y))

    assert unreduced_y.value() == config.P.y + 2 * config.curve.field
    assert normalized.y.value() == config.P.y
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
def test_assign_point_not_on_curve(config):
    chip, cs, ctx = make_context(config)
    off_curve = CurvePoint(config.P.x, config.P.y + 1, config.curve, check=False)

    chip.assign_point(ctx, off_curve)

    assert cs.verify() != []


@pytest.mark.parametrize("config", configurations)
def test_assign_point_rejects_infinity(config):
    chip, _, ctx = make_context(config)

    with pytest.raises(SynthesisError, match="infinity"):
        chip.assign_point(ctx, config.curve.infinity)


@pytest.mark.parametrize("config", configurations)
def test_select_or_assign_rejects_infinity(config):
    chip, _, ctx = make_context(config)
    p = chip.assign_point(ctx, config.P)
    c = chip.main_gate.assign_bit(ctx, 1)

    with pytest.raises(SynthesisError, match="infinity"):
        chip.select_or_assign(ctx, c, p, config.curve.infinity)


@pytest.mark.parametrize("config", configurations)
def test_assign_constant_rejects_infinity(config):
    chip, _, ctx = make_context(config)

    with pytest.raises(SynthesisError, match="infinity"):
        chip.assign_constant(ctx, config.curve.infinity)


@pytest.mark.parametrize("config", configurations)
def test_point_gadgets_stay_within_minimum_width(config):
    layout = EccConfig(main_gate_width=4)
    chip = GeneralEccChip(config.curve, BN254_SCALAR_MODULUS, layout)
    cs = ConstraintSystem(BN254_SCALAR_MODULUS)
    ctx = RegionCtx(cs.assign_region("ecc"))

    p = chip.assign_point(ctx, config.P)
    q = chip.assign_point(ctx, config.Q)
    c = chip.main_gate.assign_bit(ctx, 0)
    chip.select(ctx, c, p, q)
    chip.select_or_assign(ctx, c, p, config.Q)
    chip.add(ctx, p, q)
    chip.scalar_field_chip.decompose(ctx, chip.assign_scalar(ctx, config.scalar))

    assert max(cell.column for cell in cs.witness) < layout.main_gate_width
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
def test_assign_unknown_point(config):
    chip, cs, ctx = make_context(config)

    point = chip.assign_point(ctx, None)

    assert point.coordinates() is None
    assert any(failure.reason == "unknown witness" for failure in cs.verify())


@pytest.mark.parametrize("config", configurations)
@pytest.mark.parametrize("offset", [0, 3])
def test_expose_public(config, offset):
    public = chip_public(config, config.P)
    chip, cs, ctx = make_context(config, instance=[1] * offset + public)

    chip.expose_public(cs, chip.assign_point(ctx, config.P), offset)

    assert len(public) == 2 * chip.rns.number_of_limbs
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
def test_expose_public_wrong_instance(config):
    chip, cs, ctx = make_context(config, instance=chip_public(config, config.Q))

    chip.expose_public(cs, chip.assign_point(ctx, config.P), 0)

    failures = cs.verify()
    assert failures != []
    assert all(failure.region == "instance" for failure in failures)


@pytest.mark.parametrize("config", configurations)
def test_aux_registry(config):
    chip, cs, ctx = make_context(config)

    with pytest.raises(SynthesisError):
        chip.get_mul_aux(2, 1)
    with pytest.raises(SynthesisError):
        chip.assign_aux(ctx, 2, 1)

    chip.assign_aux_generator(ctx, config.aux_generator)
    with pytest.raises(SynthesisError):
        chip.assign_aux_generator(ctx, config.aux_generator)
    with pytest.raises(SynthesisError):
        chip.get_mul_aux(2, 1)

    chip.assign_aux(ctx, 2, 1)
    with pytest.raises(SynthesisError):
        chip.assign_aux(ctx, 2, 1)
    with pytest.raises(SynthesisError):
        chip.assign_aux(ctx, 0, 1)
    with pytest.raises(SynthesisError):
        chip.assign_aux(ctx, 2, 0)

    aux = chip.get_mul_aux(2, 1)
    assert isinstance(aux, MulAux)
    assert aux == chip.get_mul_aux(2, 1)
    assert aux.to_add.coordinates() == coordinates(config.aux_generator)

    # k = sum_{i < 128} 4^i for 256-bit scalars
    k = sum(1 << (2 * i) for i in range(128))
    assert aux.to_sub.coordinates() == coordinates(-(k * config.aux_generator))
    assert cs.verify() == []


def prepare_mul(config, window_size, number_of_pairs=1):
    chip, cs, ctx = make_context(config)
    chip.assign_aux_generator(ctx, config.aux_generator)
    chip.assign_aux(ctx, window_size, number_of_pairs)
    return chip, cs, ctx


@pytest.mark.parametrize("config", configurations)
@pytest.mark.parametrize("window_size", [1, 2, 3])
@pytest.mark.parametrize("scalar", ["random", "order_minus_one"])
def test_mul(config, window_size, scalar, save_layout):
    s = config.scalar if scalar == "random" else config.curve.order - 1
    chip, cs, ctx = prepare_mul(config, window_size)

    result = chip.mul(ctx, chip.assign_point(ctx, config.P), chip.assign_scalar(ctx, s), window_size)

    assert result.coordinates() == coordinates(s * config.P)
    assert cs.verify() == []

    save_layout(cs, "ecc", config.filename, f"mul window {window_size}")


@pytest.mark.slow
@pytest.mark.parametrize("config", configurations)
def test_mul_window_4(config):
    chip, cs, ctx = prepare_mul(config, 4)

    result = chip.mul(ctx, chip.assign_point(ctx, config.P), chip.assign_scalar(ctx, config.scalar), 4)

    assert result.coordinates() == coordinates(config.scalar * config.P)
    assert cs.verify() == []


@pytest.mark.parametrize("config", configurations)
def test_mul_by_zero_is_unsatisfiable(config):
    chip, cs, ctx = prepare_mul(config, 2)

    chip.mul(ctx, chip.assign_point(ctx, config.P), chip.assign_scalar(ctx, 0), 2)

    assert cs.verify() != []


@pytest.mark.parametrize("config", configurations)
def test_mul_errors(config):
    chip, _, ctx = prepare_mul(config, 256)
    point = chip.assign_point(ctx, config.P)
    scalar = chip.assign_scalar(ctx, config.scalar)

    with pytest.raises(SynthesisError, match="positive"):
        chip.mul(ctx, point, scalar, 0)
    with pytest.raises(SynthesisError, match="not assigned"):
        chip.mul(ctx, point, scalar, 3)
    with pytest.raises(SynthesisError, match="at least two windows"):
        chip.mul(ctx, point, scalar, 256)


@pytest.mark.parametrize("config", configurations)
@pytest.mark.parametrize("window_size", [1, 2])
@pytest.mark.parametrize("number_of_pairs", [1, 4])
def test_mul_batch_1d_horizontal(config, window_size, number_of_pairs, save_layout):
    chip, cs, ctx = prepare_mul(config, window_size, number_of_pairs)
    points = [(i + 1) * config.P + i * config.Q for i in range(number_of_pairs)]
    scalars = [(config.scalar * (i + 3)) % config.curve.order for i in range(number_of_pairs)]

    pairs = [
        (chip.assign_point(ctx, point), chip.assign_scalar(ctx, scalar)) for point, scalar in zip(points, scalars)
    ]
    result = chip.mul_batch_1d_horizontal(ctx, pairs, window_size)

    expected = scalars[0] * points[0]
    for point, scalar in zip(points[1:], scalars[1:]):
        expected = expected + scalar * point
    assert result.coordinates() == coordinates(expected)
    assert cs.verify() == []

    save_layout(cs, "ecc", config.filename, f"mul_batch_1d_horizontal {number_of_pairs} pairs window {window_size}")


@pytest.mark.parametrize("config", configurations)
def test_mul_batch_1d_horizontal_errors(config):
    chip, _, ctx = prepare_mul(config, 2, 2)
    pair = (chip.assign_point(ctx, config.P), chip.assign_scalar(ctx, config.scalar))

    with pytest.raises(SynthesisError):
        chip.mul_batch_1d_horizontal(ctx, [], 2)
    with pytest.raises(SynthesisError):
        chip.mul_batch_1d_horizontal(ctx, [pair, pair], 0)
    with pytest.raises(SynthesisError, match="not assigned"):
        chip.mul_batch_1d_horizontal(ctx, [pair, pair, pair], 2)


@pytest.mark.parametrize("config", configurations)
def test_select_multi_size_mismatch(config):
    chip, _, ctx = make_context(config)
    p = chip.assign_point(ctx, config.P)
    bit = chip.main_gate.assign_bit(ctx, 1)

    with pytest.raises(SynthesisError, match="table size"):
        chip._select_multi(ctx, Selector([bit]), Table([p, p, p]))
