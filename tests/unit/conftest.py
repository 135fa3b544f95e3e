from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

PYTHON_SOURCE = textwrap.dedent(
    """
    import os


    class Inventory:
        def __init__(self, root):
            self.root = root
            self.items = {}

        def add(self, name, quantity=1):
            self.items[name] = self.items.get(name, 0) + quantity
            return self.items[name]

        def paths(self):
            return [os.path.join(self.root, name) for name in self.items]
    """
)

C_SOURCE = textwrap.dedent(
    """
    #include <stdio.h>
    #include <stdlib.h>

    typedef struct {
        int count;
        char *name;
    } item_t;

    static int add(item_t *item, int quantity) {
        item->count += quantity;
        return item->count;
    }

    int main(void) {
        item_t item = {0, NULL};
        printf("%d\\n", add(&item, 2));
        return 0;
    }
    """
)

RUBY_SOURCE = textwrap.dedent(
    """
    class Ledger
      attr_reader :entries

      def initialize
        @entries = []
      end

      def total
        @entries.sum(&:amount)
      end
    end
    """
)


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Small three-language corpus laid out like the bundled one."""

    root = tmp_path / "corpus"
    (root / "python").mkdir(parents=True)
    (root / "c").mkdir()
    (root / "python" / "inventory.py").write_text(PYTHON_SOURCE, encoding="utf-8")
    (root / "c" / "inventory.c").write_text(C_SOURCE, encoding="utf-8")
    (root / "ruby.rb").write_text(RUBY_SOURCE, encoding="utf-8")
    return root
