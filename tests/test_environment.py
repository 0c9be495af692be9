import pytest

from phy.environment import Environment
from phy.errors import EnvError


def test_declare_and_get():
    env = Environment()
    env.declare('a', 1)
    assert env.get('a') == 1


def test_duplicate_declaration_in_same_frame():
    env = Environment()
    env.declare('a', 1)
    with pytest.raises(EnvError, match='already declared'):
        env.declare('a', 2)
    assert env.get('a') == 1


def test_child_frame_may_shadow_parent():
    parent = Environment()
    parent.declare('a', 1)
    child = Environment(parent)
    child.declare('a', 2)
    assert child.get('a') == 2
    assert parent.get('a') == 1


def test_get_delegates_to_parent_chain():
    root = Environment()
    root.declare('a', 'root')
    leaf = Environment(Environment(root))
    assert leaf.get('a') == 'root'
    with pytest.raises(EnvError, match='undefined variable b'):
        leaf.get('b')


def test_assign_mutates_nearest_binding():
    root = Environment()
    root.declare('a', 1)
    middle = Environment(root)
    middle.declare('a', 2)
    leaf = Environment(middle)
    leaf.assign('a', 3)
    assert middle.get('a') == 3
    assert root.get('a') == 1
    assert 'a' not in leaf.values


def test_assign_never_creates_binding():
    env = Environment(Environment())
    with pytest.raises(EnvError):
        env.assign('missing', 1)
    assert 'missing' not in env.values
    assert 'missing' not in env.parent.values


def test_frames_are_shared_not_copied():
    frame = Environment()
    frame.declare('n', 0)
    holder = Environment(frame)
    frame.assign('n', 5)
    assert holder.get('n') == 5
