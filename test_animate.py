import numpy as np
import pytest

from starfield import constants
from starfield.animate import glitter_offsets
from starfield.animate import render_frame
from starfield.animate import render_frames
from starfield.animate import star_phase
from starfield.animate import star_phases
from starfield.canvas import count_opaque
from starfield.canvas import new_canvas
from starfield.exceptions import StarfieldConfigError
from starfield.placement import generate_stars
from starfield.registry import Star
from starfield.registry import StarRegistry


def _find_star(frame, phase, xs, ys):
    for y in ys:
        for x in xs:
            if star_phase(x, y, frame) == phase:
                return Star(x, y)
    raise AssertionError('no coordinate with the requested phase')


def _frame_with_phase(x, y, phase):
    for frame in range(4 * constants.PHASE_DIVISOR):
        if star_phase(x, y, frame) == phase:
            return frame
    raise AssertionError('phase never reached')


@pytest.fixture
def generated():
    canvas = new_canvas(64, 48)
    canvas[20:26, 20:40] = (180, 255)
    registry = generate_stars(canvas, radius=4, seed=1)
    return canvas, registry


def test_glitter_offsets_are_cardinal():
    assert sorted(glitter_offsets()) == [(-1, 0), (0, -1), (0, 1), (1, 0)]


def test_frame_zero_glitter_draws_five_pixels():
    star = _find_star(0, constants.PHASE_GLITTER, range(2, 18), range(2, 18))
    canvas = new_canvas(20, 20)

    render_frame(canvas, StarRegistry([star]), 0)

    assert count_opaque(canvas) == 5
    for dx, dy in [(0, 0), (1, 0), (-1, 0), (0, 1), (0, -1)]:
        assert canvas[star.y + dy, star.x + dx].tolist() == [constants.STAR_GRAY, constants.OPAQUE]


def test_glitter_is_clipped_at_corners():
    canvas = new_canvas(12, 10)
    corners = [(0, 0), (11, 0), (0, 9), (11, 9)]
    for x, y in corners:
        canvas[:] = 0
        frame = _frame_with_phase(x, y, constants.PHASE_GLITTER)
        render_frame(canvas, StarRegistry([(x, y)]), frame)
        # centre plus the two arms that stay on the canvas
        assert count_opaque(canvas) == 3
        assert canvas.shape == (10, 12, 2)


@pytest.mark.parametrize('phase', [constants.PHASE_PLAIN, constants.PHASE_PLAIN_TAIL])
def test_plain_phase_draws_center_only(phase):
    star = _find_star(0, phase, range(2, 18), range(2, 18))
    canvas = new_canvas(20, 20)
    render_frame(canvas, StarRegistry([star]), 0)
    assert count_opaque(canvas) == 1
    assert canvas[star.y, star.x, constants.ALPHA] == constants.OPAQUE


def test_erase_phase_clears_star():
    star = Star(6, 6)
    frame = _frame_with_phase(star.x, star.y, constants.PHASE_ERASE)
    canvas = new_canvas(12, 12)
    canvas[6, 6] = (0, 255)

    render_frame(canvas, StarRegistry([star]), frame)

    assert count_opaque(canvas) == 0
    assert canvas[6, 6].tolist() == [0, 0]


def test_phase_periodicity_and_order():
    d = constants.PHASE_DIVISOR
    for x, y in [(0, 0), (5, 9), (31, 2), (100, 77)]:
        phases = [star_phase(x, y, f) for f in range(12 * d)]
        assert set(phases) == {0, 1, 2, 3}
        for f in range(8 * d):
            assert phases[f] == phases[f + 4 * d]
        for prev, cur in zip(phases, phases[1:]):
            assert cur in (prev, (prev + 1) % 4)
        # each phase lasts exactly d frames once aligned
        window = phases[4 * d:8 * d]
        for phase in range(4):
            assert window.count(phase) == d


def test_custom_divisor():
    phases = [star_phase(3, 4, f, divisor=2) for f in range(16)]
    for f in range(8):
        assert phases[f] == phases[f + 8]


def test_vector_phases_match_scalar(generated):
    _, registry = generated
    for frame in (0, 1, 7, 123):
        expected = [star_phase(s.x, s.y, frame) for s in registry]
        assert star_phases(registry, frame).tolist() == expected


def test_render_is_idempotent(generated):
    canvas, registry = generated
    once = render_frame(canvas.copy(), registry, 13)
    twice = render_frame(render_frame(canvas.copy(), registry, 13), registry, 13)
    assert np.array_equal(once, twice)


def test_render_does_not_depend_on_previous_frame(generated):
    canvas, registry = generated
    direct = render_frame(canvas.copy(), registry, 9)

    chained = canvas.copy()
    for frame in (0, 3, 10, 27, 9):
        render_frame(chained, registry, frame)

    assert np.array_equal(direct, chained)


def test_render_leaves_content_alone(generated):
    canvas, registry = generated
    before = canvas.copy()
    render_frame(canvas, registry, 4)
    assert np.array_equal(canvas[20:26, 20:40], before[20:26, 20:40])


def test_render_draws_exact_pixels(generated):
    canvas, registry = generated
    h, w = canvas.shape[:2]
    stars = set(registry)
    content = {(int(x), int(y)) for y, x in np.argwhere(canvas[:, :, constants.ALPHA] != 0)} - stars

    for frame in (0, 6, 13):
        phases = star_phases(registry, frame)
        expected = set(content)
        for star, phase in zip(registry, phases.tolist()):
            if phase == constants.PHASE_ERASE:
                continue
            expected.add((star.x, star.y))
            if phase == constants.PHASE_GLITTER:
                for dx, dy in glitter_offsets():
                    x, y = star.x + dx, star.y + dy
                    if 0 <= x < w and 0 <= y < h:
                        expected.add((x, y))

        image = render_frame(canvas.copy(), registry, frame)

        drawn = {(int(x), int(y)) for y, x in np.argwhere(image[:, :, constants.ALPHA] != 0)}
        assert drawn == expected
        assert count_opaque(image) == len(expected)


def test_edge_stars_clip_glitter_arms():
    canvas = new_canvas(12, 12)
    edge_stars = [(0, 5), (11, 5), (5, 0), (5, 11)]
    for x, y in edge_stars:
        canvas[:] = 0
        frame = _frame_with_phase(x, y, constants.PHASE_GLITTER)
        render_frame(canvas, StarRegistry([(x, y)]), frame)
        # centre plus three arms, one arm falls off the canvas
        assert count_opaque(canvas) == 4


@pytest.mark.parametrize('frame', [2 ** 63 - 1, 2 ** 63, 2 ** 64, 10 ** 30 + 7])
def test_huge_frames_match_scalar_phase(frame):
    registry = StarRegistry([(3, 4), (7, 7), (0, 11), (11, 0)])
    expected = [star_phase(s.x, s.y, frame) for s in registry]
    assert star_phases(registry, frame).tolist() == expected

    canvas = render_frame(new_canvas(12, 12), registry, frame)
    reduced = frame % (4 * constants.PHASE_DIVISOR)
    assert np.array_equal(canvas, render_frame(new_canvas(12, 12), registry, reduced))


def test_huge_divisor_phases_match_scalar():
    registry = StarRegistry([(3, 4), (7, 7)])
    divisor = 2 ** 62
    for frame in (0, 2 ** 64 + 5, 2 ** 70):
        expected = [star_phase(s.x, s.y, frame, divisor) for s in registry]
        assert star_phases(registry, frame, divisor).tolist() == expected


def test_empty_registry_is_noop():
    canvas = new_canvas(12, 12)
    canvas[3, 3] = (10, 20)
    before = canvas.copy()
    render_frame(canvas, StarRegistry(), 5)
    assert np.array_equal(canvas, before)


@pytest.mark.parametrize('frame', [-1, 1.5, True])
def test_bad_frame_rejected(frame):
    with pytest.raises(StarfieldConfigError):
        render_frame(new_canvas(12, 12), StarRegistry([(4, 4)]), frame)


def test_bad_divisor_rejected():
    with pytest.raises(StarfieldConfigError):
        star_phase(1, 1, 0, divisor=0)


def test_render_frames_matches_single_renders(generated):
    canvas, registry = generated
    before = canvas.copy()

    rendered = render_frames(canvas, registry, [0, 5, 10, 15], workers=2)

    assert len(rendered) == 4
    for frame, image in zip([0, 5, 10, 15], rendered):
        assert np.array_equal(image, render_frame(canvas.copy(), registry, frame))
    assert np.array_equal(canvas, before)


def test_render_frames_bad_workers(generated):
    canvas, registry = generated
    with pytest.raises(StarfieldConfigError):
        render_frames(canvas, registry, [0], workers=0)
