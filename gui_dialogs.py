"""
Dialog windows for Cost Splits GUI
"""
from __future__ import annotations
from typing import List, Optional, Tuple

try:
    import tkinter as tk
    from tkinter import ttk, messagebox
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None

import operations as ops
from computations import items_scale
from models import Pool, Transaction
from utils import (
    COST_FORMAT_MSG,
    NUMBER_FORMAT_MSG,
    format_money,
    is_valid_dollar,
    is_valid_number,
)


def _fmt_weight(w: float) -> str:
    """Blank for zero, no trailing .0 for whole numbers"""
    if not w:
        return ""
    return str(int(w)) if float(w).is_integer() else str(w)


def splits_text(people: List[str], splits: List[float]) -> str:
    parts = [f"{p}:{_fmt_weight(w)}" for p, w in zip(people, splits) if w]
    return ", ".join(parts)


class _Modal(tk.Toplevel):
    """Toplevel that grabs focus, closes on Escape and submits on Enter"""

    def __init__(self, master, title: str):
        super().__init__(master)
        self.title(title)
        self.resizable(False, False)
        self.bind("<Escape>", lambda e: self._cancel())

    def _bind_enter_to_ok(self):
        def on_enter(event=None):
            self._ok()
            return "break"  # prevent default beeps / double handling

        self.bind("<Return>", on_enter)
        self.bind("<KP_Enter>", on_enter)

    def _show(self, master):
        self.grab_set()
        self.transient(master)

    def _ok(self):
        raise NotImplementedError

    def _cancel(self):
        """Cancel and close"""
        self.result = None
        self.destroy()


class SplitEditor(_Modal):
    """Dialog for editing split weights, one entry per person"""

    def __init__(self, master, people: List[str], splits: List[float], title: str = "Split Weights"):
        super().__init__(master, title)
        self.people = people
        self.vars: List[tk.StringVar] = []
        self.entries: List[ttk.Entry] = []
        self.result: Optional[List[float]] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        ttk.Label(frm, text="Weights are relative shares; blank means not involved.").grid(
            row=0, column=0, columnspan=3, sticky="w", pady=(0, 8)
        )

        for i, p in enumerate(people):
            ttk.Label(frm, text=p).grid(row=i + 1, column=0, sticky="w")
            v = tk.StringVar(value=_fmt_weight(splits[i]))
            self.vars.append(v)
            e = ttk.Entry(frm, textvariable=v, width=10)
            e.grid(row=i + 1, column=1, sticky="w")
            self.entries.append(e)

        self.sum_var = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.sum_var).grid(row=1, column=2, rowspan=max(1, len(people)), sticky="n")

        btns = ttk.Frame(frm)
        btns.grid(row=len(people) + 2, column=0, columnspan=3, sticky="ew", pady=(10, 0))
        ttk.Button(btns, text="Equal", command=self._equal).grid(row=0, column=0, padx=3)
        ttk.Button(btns, text="Clear", command=self._clear).grid(row=0, column=1, padx=3)
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=2, padx=12)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=3, padx=3)

        for v in self.vars:
            v.trace_add("write", lambda *_: self._update_sum())
        self._update_sum()
        self._bind_enter_to_ok()
        self._show(master)

    def _read(self) -> Optional[List[float]]:
        """Current weights, or None if any entry is not a valid number"""
        out = []
        for v in self.vars:
            text = v.get().strip()
            if not is_valid_number(text, allow_empty=True):
                return None
            out.append(float(text) if text else 0.0)
        return out

    def _update_sum(self):
        d = self._read()
        self.sum_var.set("Sum: ?" if d is None else f"Sum: {sum(d):g}")

    def _equal(self):
        for v in self.vars:
            v.set("1")

    def _clear(self):
        for v in self.vars:
            v.set("")

    def _ok(self):
        d = self._read()
        if d is None:
            messagebox.showerror("Invalid split", NUMBER_FORMAT_MSG, parent=self)
            return
        self.result = d
        self.destroy()


class TransactionDialog(_Modal):
    """Dialog for adding/editing a transaction's name, cost and payer"""

    def __init__(self, master, people: List[str], transaction: Optional[Transaction] = None):
        super().__init__(master, "Add Transaction" if transaction is None else "Edit Transaction")
        self.people = people
        self.result: Optional[Tuple[str, float, int]] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        self.v_name = tk.StringVar(value=transaction.name if transaction else "")
        self.v_cost = tk.StringVar(value=f"{transaction.cost:.2f}" if transaction else "")
        payer = transaction.payer if transaction else 0
        self.v_payer = tk.StringVar(value=people[payer] if people else "")

        ttk.Label(frm, text="Name").grid(row=0, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_name, width=28).grid(row=0, column=1, sticky="w")
        ttk.Label(frm, text="Cost").grid(row=1, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_cost, width=12).grid(row=1, column=1, sticky="w")
        ttk.Label(frm, text="Paid by").grid(row=2, column=0, sticky="w", pady=2)
        ttk.Combobox(frm, textvariable=self.v_payer, values=people,
                     width=16, state="readonly").grid(row=2, column=1, sticky="w")

        btns = ttk.Frame(frm)
        btns.grid(row=3, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self._bind_enter_to_ok()
        self._show(master)

    def _ok(self):
        cost = self.v_cost.get().strip()
        if not is_valid_dollar(cost):
            messagebox.showerror("Invalid cost", COST_FORMAT_MSG, parent=self)
            return
        if self.v_payer.get() not in self.people:
            messagebox.showerror("Missing payer", "Please select a payer.", parent=self)
            return
        self.result = (self.v_name.get().strip(), float(cost), self.people.index(self.v_payer.get()))
        self.destroy()


class ItemDialog(_Modal):
    """Dialog for an item's label and face cost"""

    def __init__(self, master, label: str = "", cost: float = 0.0):
        super().__init__(master, "Edit Item")
        self.result: Optional[Tuple[str, float]] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")
        self.v_item = tk.StringVar(value=label)
        self.v_cost = tk.StringVar(value=f"{cost:.2f}")
        ttk.Label(frm, text="Item").grid(row=0, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_item, width=28).grid(row=0, column=1, sticky="w")
        ttk.Label(frm, text="Cost").grid(row=1, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_cost, width=12).grid(row=1, column=1, sticky="w")

        btns = ttk.Frame(frm)
        btns.grid(row=2, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self._bind_enter_to_ok()
        self._show(master)

    def _ok(self):
        cost = self.v_cost.get().strip()
        if not is_valid_dollar(cost):
            messagebox.showerror("Invalid cost", COST_FORMAT_MSG, parent=self)
            return
        self.result = (self.v_item.get().strip(), float(cost))
        self.destroy()


class ItemsDialog(_Modal):
    """
    Editor for the items of one itemized transaction.
    Works on its own copy of the pool; `result` is the edited pool on OK.
    """

    def __init__(self, master, pool: Pool, t_index: int):
        t = pool.transactions[t_index]
        super().__init__(master, f"Items - {t.name or f'Transaction {t_index + 1}'}")
        self.pool = pool
        self.t_index = t_index
        self.result: Optional[Pool] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        self.info_var = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.info_var).grid(row=0, column=0, sticky="w")

        cols = ("item", "cost", "effective", "splits")
        self.tree = ttk.Treeview(frm, columns=cols, show="headings", height=10)
        for c, w in zip(cols, [160, 80, 80, 260]):
            self.tree.heading(c, text=c)
            self.tree.column(c, width=w, anchor="w")
        self.tree.grid(row=1, column=0, sticky="nsew", pady=6)
        self.tree.bind("<Double-1>", lambda e: self._edit())

        btns = ttk.Frame(frm)
        btns.grid(row=2, column=0, sticky="ew")
        ttk.Button(btns, text="Add Item", command=self._add).pack(side="left", padx=3)
        ttk.Button(btns, text="Edit", command=self._edit).pack(side="left", padx=3)
        ttk.Button(btns, text="Splits…", command=self._splits).pack(side="left", padx=3)
        ttk.Button(btns, text="Delete", command=self._delete).pack(side="left", padx=3)
        ttk.Button(btns, text="Cancel", command=self._cancel).pack(side="right", padx=3)
        ttk.Button(btns, text="OK", command=self._ok).pack(side="right", padx=3)

        self._refresh()
        self._show(master)

    @property
    def transaction(self) -> Transaction:
        return self.pool.transactions[self.t_index]

    def _selected(self) -> Optional[int]:
        sel = self.tree.selection()
        return int(sel[0]) if sel else None

    def _refresh(self):
        for iid in self.tree.get_children():
            self.tree.delete(iid)
        t = self.transaction
        items = t.items or []
        scale = items_scale(t)
        for ii, it in enumerate(items):
            self.tree.insert("", "end", iid=str(ii), values=(
                it.item or f"Item {ii + 1}",
                format_money(it.cost),
                format_money(it.cost * scale),
                splits_text(self.pool.people, it.splits),
            ))
        items_total = sum(it.cost for it in items)
        self.info_var.set(
            f"Transaction cost {format_money(t.cost)}; items total {format_money(items_total)} "
            f"(rescaled to the transaction cost)"
        )

    def _add(self):
        self.pool = ops.add_item(self.pool, self.t_index)
        self._refresh()

    def _edit(self):
        ii = self._selected()
        if ii is None:
            return
        it = self.transaction.items[ii]
        dlg = ItemDialog(self, it.item, it.cost)
        self.wait_window(dlg)
        if dlg.result:
            label, cost = dlg.result
            self.pool = ops.edit_item(self.pool, self.t_index, ii, item=label, cost=cost)
            self._refresh()

    def _splits(self):
        ii = self._selected()
        if ii is None:
            return
        it = self.transaction.items[ii]
        dlg = SplitEditor(self, self.pool.people, it.splits, title=f"Splits - {it.item or f'Item {ii + 1}'}")
        self.wait_window(dlg)
        if dlg.result is not None:
            for pi, w in enumerate(dlg.result):
                self.pool = ops.set_item_split(self.pool, self.t_index, ii, pi, w)
            self._refresh()

    def _delete(self):
        ii = self._selected()
        if ii is None:
            return
        self.pool = ops.delete_item(self.pool, self.t_index, ii)
        if not self.transaction.is_itemized:
            # last item removed: the transaction is back to simple mode
            self._ok()
            return
        self._refresh()

    def _ok(self):
        self.result = self.pool
        self.destroy()
