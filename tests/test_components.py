"""Tests for the component tree and its drag override policy."""

import pytest

from rocketaero.components import OverridePolicy, Rocket, RocketComponent


@pytest.fixture
def tree() -> dict[str, RocketComponent]:
    """Rocket -> stage -> (nose, body -> fins)."""
    rocket = Rocket()
    stage = RocketComponent("Sustainer")
    nose = RocketComponent("Nose cone")
    body = RocketComponent("Body tube")
    fins = RocketComponent("Fin set")

    rocket.add_child(stage)
    stage.add_child(nose)
    stage.add_child(body)
    body.add_child(fins)

    return {"rocket": rocket, "stage": stage, "nose": nose, "body": body, "fins": fins}


class TestTreeStructure:
    """Test building and walking the tree."""

    def test_parent_and_children(self, tree) -> None:
        """add_child links parent and children."""
        assert tree["fins"].parent is tree["body"]
        assert tree["stage"].children == (tree["nose"], tree["body"])
        assert tree["rocket"].parent is None

    def test_root_and_depth(self, tree) -> None:
        """root and depth follow the parent chain."""
        assert tree["fins"].root is tree["rocket"]
        assert tree["fins"].depth == 3
        assert tree["rocket"].depth == 0

    def test_walk_is_preorder(self, tree) -> None:
        """walk visits parents before children."""
        names = [c.name for c in tree["rocket"].walk()]
        assert names == ["Rocket", "Sustainer", "Nose cone", "Body tube", "Fin set"]

    def test_walk_postorder_visits_children_first(self, tree) -> None:
        """walk_postorder visits children before parents."""
        names = [c.name for c in tree["rocket"].walk_postorder()]
        assert names == ["Nose cone", "Fin set", "Body tube", "Sustainer", "Rocket"]

    def test_ancestors(self, tree) -> None:
        """ancestors runs from the parent up to the root."""
        assert list(tree["fins"].ancestors()) == [tree["body"], tree["stage"], tree["rocket"]]

    def test_remove_child(self, tree) -> None:
        """remove_child detaches the child."""
        tree["stage"].remove_child(tree["nose"])

        assert tree["nose"].parent is None
        assert tree["stage"].children == (tree["body"],)

    def test_remove_non_child_raises(self, tree) -> None:
        """Removing a component that is not a child raises."""
        with pytest.raises(ValueError, match="not a subcomponent"):
            tree["rocket"].remove_child(tree["fins"])

    def test_add_attached_child_raises(self, tree) -> None:
        """A component with a parent cannot be added again."""
        with pytest.raises(ValueError, match="already belongs"):
            tree["nose"].add_child(tree["fins"])

    def test_add_ancestor_raises(self) -> None:
        """Adding an ancestor as a child raises."""
        outer = RocketComponent("Outer")
        inner = RocketComponent("Inner")
        outer.add_child(inner)

        with pytest.raises(ValueError, match="cycle"):
            inner.add_child(outer.root)

    def test_add_self_raises(self) -> None:
        """A component cannot be its own child."""
        part = RocketComponent("Part")
        with pytest.raises(ValueError, match="cycle"):
            part.add_child(part)

    def test_rocket_cannot_be_child(self, tree) -> None:
        """The rocket cannot be added under another component."""
        with pytest.raises(ValueError, match="Cannot add rocket"):
            tree["body"].add_child(Rocket("Other"))

    def test_str_and_repr(self, tree) -> None:
        """str is the name; repr names the class too."""
        assert str(tree["nose"]) == "Nose cone"
        assert repr(tree["rocket"]) == "Rocket('Rocket')"


class TestOverridePolicy:
    """Test override flags and their read-time evaluation."""

    def test_satisfies_protocol(self, tree) -> None:
        """Components satisfy OverridePolicy."""
        assert isinstance(tree["fins"], OverridePolicy)
        assert isinstance(tree["rocket"], OverridePolicy)

    def test_rocket_sentinel(self, tree) -> None:
        """Only the rocket reports is_rocket."""
        assert tree["rocket"].is_rocket
        assert not tree["stage"].is_rocket

    def test_defaults(self) -> None:
        """A new component has no override."""
        part = RocketComponent("Part")

        assert not part.cd_overridden
        assert not part.cd_overridden_by_ancestor
        assert part.override_cd == 0.0

    def test_override_without_subcomponents_stays_local(self, tree) -> None:
        """An override without subcomponents does not reach children."""
        tree["body"].cd_overridden = True

        assert not tree["fins"].cd_overridden_by_ancestor

    def test_override_with_subcomponents_reaches_descendants(self, tree) -> None:
        """A subtree override covers every descendant."""
        tree["stage"].cd_overridden = True
        tree["stage"].override_subcomponents_cd = True

        assert tree["fins"].cd_overridden_by_ancestor
        assert tree["nose"].cd_overridden_by_ancestor
        assert not tree["stage"].cd_overridden_by_ancestor
        assert not tree["rocket"].cd_overridden_by_ancestor

    def test_ancestor_override_is_not_cached(self, tree) -> None:
        """Ancestor overrides are evaluated at read time."""
        tree["stage"].cd_overridden = True
        tree["stage"].override_subcomponents_cd = True
        assert tree["fins"].cd_overridden_by_ancestor

        tree["stage"].cd_overridden = False
        assert not tree["fins"].cd_overridden_by_ancestor

    def test_detaching_drops_ancestor_override(self, tree) -> None:
        """A detached component loses its ancestor's override."""
        tree["body"].cd_overridden = True
        tree["body"].override_subcomponents_cd = True
        assert tree["fins"].cd_overridden_by_ancestor

        tree["body"].remove_child(tree["fins"])
        assert not tree["fins"].cd_overridden_by_ancestor

    def test_override_cd_stored_as_float(self) -> None:
        """override_cd stores ints as floats."""
        part = RocketComponent("Part", cd_overridden=True, override_cd=1)

        assert part.override_cd == 1.0
        assert isinstance(part.override_cd, float)

    def test_override_cd_rejects_non_finite(self) -> None:
        """Non-finite override values are rejected."""
        part = RocketComponent("Part")
        with pytest.raises(ValueError, match="finite"):
            part.override_cd = float("nan")
        with pytest.raises(ValueError, match="finite"):
            RocketComponent("Other", override_cd=float("inf"))
