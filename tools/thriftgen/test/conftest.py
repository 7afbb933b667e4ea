"""Shared fixtures for thriftgen tests."""

import pytest
import sys
import os

# Add the project root to sys.path so 'tools.thriftgen' is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", ".."))


TUTORIAL_IDL = """\
/*
 * Calculator service, adapted from the thrift tutorial.
 */
namespace cpp tutorial
namespace rust tutorial

include "shared.thrift"

typedef i32 MyInteger

const i32 INT32CONSTANT = 9853
const string GREETING = "hello world"

enum Operation {
  ADD,
  SUBTRACT,
  MULTIPLY,
  DIVIDE
}

struct Work {
  1: required i32 num1;
  2: required i32 num2;
  3: required Operation op;
  4: optional string comment
}

exception InvalidOperation {
  1: required i32 whatOp;
  2: optional string why
}

# Services come last.
service Calculator extends SharedService {
  void ping();
  i32 add(1: i32 num1, 2: i32 num2);
  i32 calculate(1: i32 logid, 2: Work w) throws (1: InvalidOperation ouch);
  oneway void zip()
}
"""


SIMPLE_IDL = """\
namespace rust simple

struct Point {
  1: required i32 x;
  2: required i32 y
}
"""


@pytest.fixture
def tutorial_idl():
    """Calculator IDL exercising every top-level construct."""
    return TUTORIAL_IDL


@pytest.fixture
def simple_idl():
    """A single struct under a rust namespace."""
    return SIMPLE_IDL
