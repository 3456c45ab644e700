"""
Main application window for Cost Splits GUI
"""
from __future__ import annotations
import os
from typing import Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox, filedialog, simpledialog
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None
    filedialog = None
    simpledialog = None

import operations as ops
from computations import compute_settlements, compute_summary, person_report
from config import (
    DEFAULT_STATE_FILENAME,
    delete_pool,
    dump_state_json,
    has_unsaved_changes,
    load_pool,
    load_state_file,
    load_state_json,
    save_pool,
    save_state_file,
    saved_pool_rows,
)
from excel_export import export_excel
from gui_dialogs import ItemsDialog, SplitEditor, TransactionDialog, splits_text
from models import Pool
from share import build_share_url, load_state_from_url
from utils import format_money, format_net

SHARE_BASE_URL = "https://cost-splits.local/"


class CostSplitsApp(ttk.Frame):
    """Main application window"""

    def __init__(self, master: tk.Tk, pool: Optional[Pool] = None):
        super().__init__(master, padding=8)
        self.master = master
        self.master.title("Cost Splits")
        self.master.geometry("1000x620")
        self.grid(row=0, column=0, sticky="nsew")
        self.master.rowconfigure(0, weight=1)
        self.master.columnconfigure(0, weight=1)

        self.state_path: Optional[str] = None
        self.pool: Pool = pool or Pool()

        self._build_menu()
        self._build_ui()
        self.refresh_all()

    # ---------- State ----------
    def apply(self, fn, *args, **kwargs) -> bool:
        """Run a state operation; show its error instead of raising"""
        try:
            self.pool = fn(self.pool, *args, **kwargs)
        except (ValueError, IndexError) as ex:
            messagebox.showerror("Cost Splits", str(ex))
            return False
        self.refresh_all()
        return True

    def replace_pool(self, pool: Pool):
        self.pool = pool
        self.refresh_all()

    def _confirm_discard(self) -> bool:
        if has_unsaved_changes(self.pool):
            return messagebox.askyesno("Unsaved changes", "You have unsaved changes. Continue?")
        return True

    # ---------- Menu ----------
    def _build_menu(self):
        """Build application menu bar"""
        menubar = tk.Menu(self.master)
        filem = tk.Menu(menubar, tearoff=0)
        filem.add_command(label="New Pool", command=self.new_pool)
        filem.add_command(label="Open…", command=self.open_state)
        filem.add_command(label="Save", command=self.save_state)
        filem.add_command(label="Save As…", command=self.save_state_as)
        filem.add_separator()
        filem.add_command(label="Export Excel…", command=self.export_excel_dialog)
        filem.add_separator()
        filem.add_command(label="Exit", command=self.master.destroy)
        menubar.add_cascade(label="File", menu=filem)

        sharem = tk.Menu(menubar, tearoff=0)
        sharem.add_command(label="Copy Share Link", command=self.copy_share_link)
        sharem.add_command(label="Load Share Link…", command=self.load_share_link)
        sharem.add_separator()
        sharem.add_command(label="Copy State JSON", command=self.copy_state_json)
        sharem.add_command(label="Load State JSON…", command=self.load_state_json_dialog)
        menubar.add_cascade(label="Share", menu=sharem)

        self.master.config(menu=menubar)

    # ---------- UI ----------
    def _build_ui(self):
        """Build main UI with tabs"""
        nb = ttk.Notebook(self)
        nb.grid(row=0, column=0, sticky="nsew")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.tab_people = ttk.Frame(nb, padding=8)
        self.tab_transactions = ttk.Frame(nb, padding=8)
        self.tab_summary = ttk.Frame(nb, padding=8)
        self.tab_pools = ttk.Frame(nb, padding=8)

        nb.add(self.tab_people, text="People")
        nb.add(self.tab_transactions, text="Transactions")
        nb.add(self.tab_summary, text="Summary")
        nb.add(self.tab_pools, text="Pools")

        self._build_people_tab()
        self._build_transactions_tab()
        self._build_summary_tab()
        self._build_pools_tab()

    def _build_people_tab(self):
        """Build people management tab"""
        self.tab_people.columnconfigure(0, weight=1)
        frm = ttk.Frame(self.tab_people)
        frm.grid(row=0, column=0, sticky="nsew")
        self.tab_people.rowconfigure(0, weight=1)

        ttk.Label(frm, text="People:").grid(row=0, column=0, sticky="w")
        self.people_list = tk.Listbox(frm, height=18)
        self.people_list.grid(row=1, column=0, sticky="nsew", pady=6)
        frm.rowconfigure(1, weight=1)
        frm.columnconfigure(0, weight=1)

        controls = ttk.Frame(frm)
        controls.grid(row=2, column=0, sticky="ew")
        self.new_person_var = tk.StringVar()
        entry = ttk.Entry(controls, textvariable=self.new_person_var, width=18)
        entry.pack(side="left")
        entry.bind("<Return>", lambda e: self.add_person())
        ttk.Button(controls, text="Add", command=self.add_person).pack(side="left", padx=4)
        ttk.Button(controls, text="Rename Selected", command=self.rename_selected_person).pack(side="left", padx=4)
        ttk.Button(controls, text="Remove Selected", command=self.remove_selected_person).pack(side="left", padx=4)

    def _build_transactions_tab(self):
        """Build transactions tab"""
        top = ttk.Frame(self.tab_transactions)
        top.grid(row=0, column=0, sticky="ew")
        self.tab_transactions.columnconfigure(0, weight=1)

        ttk.Button(top, text="Add", command=self.add_transaction).pack(side="left", padx=3)
        ttk.Button(top, text="Edit", command=self.edit_selected_transaction).pack(side="left", padx=3)
        ttk.Button(top, text="Delete", command=self.delete_selected_transaction).pack(side="left", padx=3)
        ttk.Separator(top, orient="vertical").pack(side="left", fill="y", padx=6)
        ttk.Button(top, text="Splits…", command=self.edit_selected_splits).pack(side="left", padx=3)
        ttk.Button(top, text="Itemize", command=self.itemize_selected).pack(side="left", padx=3)
        ttk.Button(top, text="Items…", command=self.edit_selected_items).pack(side="left", padx=3)
        ttk.Button(top, text="Normal", command=self.unitemize_selected).pack(side="left", padx=3)

        ttk.Separator(self.tab_transactions, orient="horizontal").grid(row=1, column=0, sticky="ew", pady=6)

        cols = ("name", "payer", "cost", "splits")
        self.tx_tree = ttk.Treeview(self.tab_transactions, columns=cols, show="headings", height=18)
        for c, w in zip(cols, [220, 120, 90, 500]):
            self.tx_tree.heading(c, text=c)
            self.tx_tree.column(c, width=w, anchor="w")
        self.tx_tree.grid(row=2, column=0, sticky="nsew")
        self.tx_tree.bind("<Double-1>", lambda e: self.edit_selected_transaction())
        self.tab_transactions.rowconfigure(2, weight=1)

        yscroll = ttk.Scrollbar(self.tab_transactions, orient="vertical", command=self.tx_tree.yview)
        self.tx_tree.configure(yscroll=yscroll.set)
        yscroll.grid(row=2, column=1, sticky="ns")

    def _build_summary_tab(self):
        """Build summary tab: totals, settlements and the selected person's view"""
        self.tab_summary.columnconfigure(0, weight=1)
        self.tab_summary.columnconfigure(1, weight=1)

        cols = ("person", "paid", "cost", "owed")
        self.sum_tree = ttk.Treeview(self.tab_summary, columns=cols, show="headings", height=10)
        for c, title, w in zip(cols, ["Person", "Total Paid", "Total Cost", "Total Owed"], [120, 110, 110, 110]):
            self.sum_tree.heading(c, text=title)
            self.sum_tree.column(c, width=w, anchor="w")
        self.sum_tree.tag_configure("credit", background="#C6EFCE")
        self.sum_tree.tag_configure("debit", background="#FFC7CE")
        self.sum_tree.tag_configure("total", font=("TkDefaultFont", 10, "bold"))
        self.sum_tree.grid(row=0, column=0, sticky="nsew", pady=6)
        self.sum_tree.bind("<<TreeviewSelect>>", lambda e: self.refresh_person_view())

        ttk.Label(self.tab_summary, text="Suggested Settlements:").grid(row=1, column=0, sticky="w", pady=(10, 0))
        self.settle_list = tk.Listbox(self.tab_summary, height=8)
        self.settle_list.grid(row=2, column=0, sticky="nsew")
        self.tab_summary.rowconfigure(2, weight=1)

        ttk.Label(self.tab_summary, text="Person view (select a person):").grid(row=1, column=1, sticky="w",
                                                                               padx=(10, 0), pady=(10, 0))
        self.person_text = tk.Text(self.tab_summary, height=20, width=50, state="disabled", wrap="word")
        self.person_text.grid(row=0, column=1, rowspan=3, sticky="nsew", padx=(10, 0), pady=(30, 0))

    def _build_pools_tab(self):
        """Build saved pools tab"""
        self.tab_pools.columnconfigure(0, weight=1)
        top = ttk.Frame(self.tab_pools)
        top.grid(row=0, column=0, sticky="ew")
        ttk.Label(top, text="Pool name").pack(side="left")
        self.pool_name_var = tk.StringVar()
        self.pool_name_var.trace_add("write", lambda *_: self._on_pool_name())
        ttk.Entry(top, textvariable=self.pool_name_var, width=24).pack(side="left", padx=4)
        ttk.Button(top, text="Save Pool", command=self.save_current_pool).pack(side="left", padx=3)
        ttk.Button(top, text="New Pool", command=self.new_pool).pack(side="left", padx=3)
        self.pool_status = tk.StringVar(value="")
        ttk.Label(top, textvariable=self.pool_status).pack(side="left", padx=8)

        cols = ("pool", "people", "transactions")
        self.pool_tree = ttk.Treeview(self.tab_pools, columns=cols, show="headings", height=16)
        for c, w in zip(cols, [240, 90, 110]):
            self.pool_tree.heading(c, text=c)
            self.pool_tree.column(c, width=w, anchor="w")
        self.pool_tree.tag_configure("active", background="#D9E1F2")
        self.pool_tree.grid(row=1, column=0, sticky="nsew", pady=6)
        self.pool_tree.bind("<Double-1>", lambda e: self.load_selected_pool())
        self.tab_pools.rowconfigure(1, weight=1)

        btns = ttk.Frame(self.tab_pools)
        btns.grid(row=2, column=0, sticky="ew")
        ttk.Button(btns, text="Load Selected", command=self.load_selected_pool).pack(side="left", padx=3)
        ttk.Button(btns, text="Delete Selected", command=self.delete_selected_pool).pack(side="left", padx=3)

    # ---------- People ----------
    def _selected_person(self) -> Optional[int]:
        sel = self.people_list.curselection()
        return sel[0] if sel else None

    def add_person(self):
        """Add new person"""
        if self.apply(ops.add_person, self.new_person_var.get()):
            self.new_person_var.set("")

    def rename_selected_person(self):
        idx = self._selected_person()
        if idx is None:
            return
        name = simpledialog.askstring("Rename", "New name:", initialvalue=self.pool.people[idx], parent=self.master)
        if name is not None:
            self.apply(ops.rename_person, idx, name)

    def remove_selected_person(self):
        """Remove selected person"""
        idx = self._selected_person()
        if idx is None:
            return
        if ops.person_is_involved(self.pool, idx):
            if not messagebox.askyesno(
                "Remove person",
                "This person is involved in transactions. Deleting them will also remove those "
                "transactions. Continue?",
            ):
                return
        self.apply(ops.delete_person, idx)

    # ---------- Transactions ----------
    def _selected_transaction(self) -> Optional[int]:
        sel = self.tx_tree.selection()
        if not sel:
            messagebox.showinfo("Transactions", "Select a transaction row first.")
            return None
        return int(sel[0])

    def add_transaction(self):
        if not self.pool.people:
            messagebox.showerror("No people", "Please add at least one person first.")
            return
        dlg = TransactionDialog(self.master, self.pool.people)
        self.master.wait_window(dlg)
        if dlg.result:
            name, cost, payer = dlg.result
            self.apply(ops.add_transaction, cost, payer, name)

    def edit_selected_transaction(self):
        ti = self._selected_transaction()
        if ti is None:
            return
        dlg = TransactionDialog(self.master, self.pool.people, self.pool.transactions[ti])
        self.master.wait_window(dlg)
        if dlg.result:
            name, cost, payer = dlg.result
            self.apply(ops.edit_transaction, ti, name=name, cost=cost, payer=payer)

    def delete_selected_transaction(self):
        ti = self._selected_transaction()
        if ti is None:
            return
        if messagebox.askyesno("Delete", "Delete selected transaction?"):
            self.apply(ops.delete_transaction, ti)

    def edit_selected_splits(self):
        ti = self._selected_transaction()
        if ti is None:
            return
        t = self.pool.transactions[ti]
        if t.is_itemized:
            self.edit_selected_items()
            return
        dlg = SplitEditor(self.master, self.pool.people, t.splits)
        self.master.wait_window(dlg)
        if dlg.result is not None:
            self.apply(ops.set_splits, ti, dlg.result)

    def itemize_selected(self):
        ti = self._selected_transaction()
        if ti is None or self.pool.transactions[ti].is_itemized:
            return
        if self.apply(ops.itemize_transaction, ti):
            self.edit_selected_items(ti)

    def edit_selected_items(self, ti: Optional[int] = None):
        if ti is None:
            ti = self._selected_transaction()
        if ti is None:
            return
        if not self.pool.transactions[ti].is_itemized:
            messagebox.showinfo("Items", "Itemize the transaction first.")
            return
        dlg = ItemsDialog(self.master, self.pool, ti)
        self.master.wait_window(dlg)
        if dlg.result is not None:
            self.replace_pool(dlg.result)

    def unitemize_selected(self):
        ti = self._selected_transaction()
        if ti is None:
            return
        self.apply(ops.unitemize_transaction, ti)

    # ---------- Pools ----------
    def _on_pool_name(self):
        name = self.pool_name_var.get()
        if name != self.pool.pool:
            self.pool = ops.set_pool_name(self.pool, name)
            self._update_pool_status()

    def _update_pool_status(self):
        self.pool_status.set("Unsaved changes" if has_unsaved_changes(self.pool) else "Saved")

    def save_current_pool(self):
        try:
            save_pool(self.pool.pool, self.pool)
        except (ValueError, OSError) as ex:
            messagebox.showerror("Save pool", str(ex))
            return
        self.refresh_pools()

    def new_pool(self):
        if not self._confirm_discard():
            return
        self.state_path = None
        self.replace_pool(ops.reset_pool())

    def _selected_pool(self) -> Optional[str]:
        sel = self.pool_tree.selection()
        return sel[0] if sel else None

    def load_selected_pool(self):
        name = self._selected_pool()
        if name is None or not self._confirm_discard():
            return
        try:
            self.replace_pool(load_pool(name))
        except Exception as ex:
            messagebox.showerror("Load pool", f"Failed to load state: {ex}")

    def delete_selected_pool(self):
        name = self._selected_pool()
        if name is None:
            return
        if messagebox.askyesno("Delete pool", f"Delete saved pool '{name}'?"):
            try:
                delete_pool(name)
            except OSError as ex:
                messagebox.showerror("Delete pool", str(ex))
                return
            self.refresh_pools()

    # ---------- File ops ----------
    def open_state(self):
        """Open state from JSON file"""
        if not self._confirm_discard():
            return
        fp = filedialog.askopenfilename(
            title="Open state JSON",
            filetypes=[("State JSON", "*.json"), ("All files", "*.*")]
        )
        if not fp:
            return
        try:
            self.replace_pool(load_state_file(fp))
            self.state_path = fp
            self.master.title(f"Cost Splits - {os.path.basename(fp)}")
        except Exception as ex:
            messagebox.showerror("Open failed", f"Failed to load state: {ex}")

    def save_state(self):
        """Save state to file"""
        if not self.state_path:
            return self.save_state_as()
        try:
            save_state_file(self.pool, self.state_path)
            self.master.title(f"Cost Splits - {os.path.basename(self.state_path)}")
        except Exception as ex:
            messagebox.showerror("Save failed", str(ex))

    def save_state_as(self):
        """Save state to new file"""
        fp = filedialog.asksaveasfilename(
            title="Save state JSON",
            defaultextension=".json",
            initialfile=DEFAULT_STATE_FILENAME,
            filetypes=[("State JSON", "*.json")]
        )
        if not fp:
            return
        self.state_path = fp
        self.save_state()

    def export_excel_dialog(self):
        """Export to Excel file"""
        fp = filedialog.asksaveasfilename(
            title="Export Excel",
            defaultextension=".xlsx",
            filetypes=[("Excel Workbook", "*.xlsx")]
        )
        if not fp:
            return
        try:
            export_excel(self.pool, fp)
            messagebox.showinfo("Export", f"Exported: {fp}")
        except Exception as ex:
            messagebox.showerror("Export failed", str(ex))

    # ---------- Share ----------
    def _to_clipboard(self, text: str, what: str):
        self.master.clipboard_clear()
        self.master.clipboard_append(text)
        messagebox.showinfo("Share", f"{what} copied to clipboard.")

    def copy_share_link(self):
        self._to_clipboard(build_share_url(self.pool, SHARE_BASE_URL), "Share link")

    def copy_state_json(self):
        self._to_clipboard(dump_state_json(self.pool), "State JSON")

    def load_share_link(self):
        url = simpledialog.askstring("Load Share Link", "Paste a share link:", parent=self.master)
        if not url or not self._confirm_discard():
            return
        try:
            pool = load_state_from_url(url.strip())
        except Exception as ex:
            messagebox.showerror("Load failed", f"Failed to load state: {ex}")
            return
        if pool is None:
            messagebox.showerror("Load failed", "The link has no state parameter.")
            return
        self.replace_pool(pool)

    def load_state_json_dialog(self):
        text = simpledialog.askstring("Load State JSON", "Paste state JSON:", parent=self.master)
        if not text or not self._confirm_discard():
            return
        try:
            self.replace_pool(load_state_json(text))
        except Exception as ex:
            messagebox.showerror("Load failed", f"Failed to load state: {ex}")

    # ---------- Refresh ----------
    def refresh_all(self):
        """Refresh all UI elements; every edit recomputes the summary"""
        if self.pool_name_var.get() != self.pool.pool:
            self.pool_name_var.set(self.pool.pool)
        self.refresh_people()
        self.refresh_transactions()
        self.refresh_summary()
        self.refresh_pools()

    def refresh_people(self):
        """Refresh people list"""
        self.people_list.delete(0, tk.END)
        for p in self.pool.people:
            self.people_list.insert(tk.END, p)

    def refresh_transactions(self):
        """Refresh transactions tree view"""
        for iid in self.tx_tree.get_children():
            self.tx_tree.delete(iid)
        people = self.pool.people
        for ti, t in enumerate(self.pool.transactions):
            if t.is_itemized:
                split_txt = f"itemized ({len(t.items)} items)"
            else:
                split_txt = splits_text(people, t.splits) or "(no splits)"
            values = (t.name or f"Transaction {ti + 1}", people[t.payer], format_money(t.cost), split_txt)
            self.tx_tree.insert("", "end", iid=str(ti), values=values)

    def refresh_summary(self):
        """Refresh summary table and settlement suggestions"""
        for iid in self.sum_tree.get_children():
            self.sum_tree.delete(iid)
        people = self.pool.people
        summary = compute_summary(people, self.pool.transactions)
        for i, p in enumerate(people):
            net = summary.net[i]
            tag = "credit" if net > 0 else "debit" if net < 0 else ""
            self.sum_tree.insert("", "end", iid=str(i), tags=(tag,) if tag else (), values=(
                p, format_money(summary.paid[i]), format_money(summary.owed[i]), format_net(net)
            ))
        if people:
            self.sum_tree.insert("", "end", iid="total", tags=("total",), values=(
                "Total",
                format_money(sum(summary.paid)),
                format_money(sum(summary.owed)),
                format_net(sum(summary.net)),
            ))

        self.settle_list.delete(0, tk.END)
        for s in compute_settlements(people, self.pool.transactions):
            self.settle_list.insert(tk.END, f"{people[s.from_index]} pays {people[s.to_index]} {format_money(s.amount)}")
        self.refresh_person_view()
        self._update_pool_status()

    def refresh_person_view(self):
        sel = self.sum_tree.selection()
        lines = []
        if sel and sel[0] != "total":
            idx = int(sel[0])
            people = self.pool.people
            rep = person_report(people, self.pool.transactions, idx)
            name = rep["name"]
            lines.append(f"{name}'s summary")
            lines.append(f"Paid {format_money(rep['paid'])}, cost {format_money(rep['owed'])}, "
                         f"net {format_net(rep['net'])}")
            lines.append("")
            if rep["paid_transactions"]:
                lines.append("Paid Transactions:")
                total = 0.0
                for t in rep["paid_transactions"]:
                    lines.append(f"  {t.name or '(unnamed)'}: {format_money(t.cost)}")
                    total += t.cost
                lines.append(f"  Total: {format_money(total)}")
            else:
                lines.append(f"{name} didn't pay for any transactions.")
            lines.append("")
            if rep["shared_transactions"]:
                lines.append("Shared Splits:")
                total = 0.0
                for t, share in rep["shared_transactions"]:
                    lines.append(f"  {t.name or '(unnamed)'} (paid by {people[t.payer]}): {format_money(share)}")
                    total += share
                lines.append(f"  Total: {format_money(total)}")
            else:
                lines.append(f"{name} wasn't involved in any cost splits.")
            lines.append("")
            if rep["settlements"]:
                lines.append("Settlement Plan:")
                for s in rep["settlements"]:
                    lines.append(f"  {people[s.from_index]} pays {people[s.to_index]} {format_money(s.amount)}")
            else:
                lines.append(f"{name} has no settlements.")

        self.person_text.configure(state="normal")
        self.person_text.delete("1.0", tk.END)
        self.person_text.insert("1.0", "\n".join(lines))
        self.person_text.configure(state="disabled")

    def refresh_pools(self):
        """Refresh saved pools table; the active pool is highlighted"""
        for iid in self.pool_tree.get_children():
            self.pool_tree.delete(iid)
        for name, n_people, n_txns in saved_pool_rows():
            tags = ("active",) if name == self.pool.pool else ()
            self.pool_tree.insert("", "end", iid=name, tags=tags, values=(name, n_people, n_txns))
        self._update_pool_status()
