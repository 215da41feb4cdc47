# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from __future__ import annotations

import abc
from typing import Callable, Sequence, TYPE_CHECKING

import attr

if TYPE_CHECKING:
    from abnfc.language.parser import Parser

# Result of action: values that are appended to results of parent parselet
ActionResult = Sequence[object]

# Hook invoked with parser (positioned at end of match), begin offset of match and results of nested parselets
ActionHook = Callable[['Parser', int, Sequence[object]], object]


@attr.dataclass(frozen=True, order=False, eq=False)
class Action(abc.ABC):
    """
    Action is used for convert results of combinators to result of parselet.

    Actions are invoked only when parselet is matched, e.g. create syntax nodes or collections of nodes
    """

    @abc.abstractmethod
    def __call__(self, parser: Parser, begin: int, results: Sequence[object]) -> ActionResult:
        raise NotImplementedError


@attr.dataclass(frozen=True, order=False, eq=False)
class ReturnResultAction(Action):
    """ Transient parselet: results of nested parselets are passed to parent parselet as is """

    def __call__(self, parser: Parser, begin: int, results: Sequence[object]) -> ActionResult:
        return results


@attr.dataclass(frozen=True, order=False, eq=False)
class CallAction(Action):
    """ Call hook and pass it's result to parent parselet. If hook returns `None`, nothing is passed """
    functor: ActionHook

    def __call__(self, parser: Parser, begin: int, results: Sequence[object]) -> ActionResult:
        result = self.functor(parser, begin, results)
        return () if result is None else (result,)


def make_return_result() -> Action:
    """ Returns action that returns results of nested parselets as result of parselet """
    return ReturnResultAction()


def make_call(functor: ActionHook) -> Action:
    """ Returns action that returns result of hook as result of parselet """
    return CallAction(functor)
