"""Extensions bundled with luckmd."""

from luckmd.extensions.demo import DemoExtension

__all__ = ["DemoExtension"]
