import tkinter as tk
import time
import datetime
from tkinter import messagebox, ttk
import matplotlib.pyplot as plt

from config import WINDOW_TITLE, WINDOW_GEOMETRY, CURRENCY_LABEL
from store import STATUS_NOT_FOUND
from tracker import ShardTracker, drops_to_frame
from utils import format_gp, log_debug, parse_manual_price, parse_manual_timestamp


# -----------------------
# GUI
# -----------------------
def start_gui(tracker=None):
    tracker = tracker or ShardTracker()

    root = tk.Tk()
    root.title(WINDOW_TITLE)
    root.geometry(WINDOW_GEOMETRY)

    now = datetime.datetime.now()

    # Eingabe: Einzel-Drop
    entry_frame = tk.LabelFrame(root, text="Add drop", padx=8, pady=8)
    entry_frame.pack(fill="x", padx=12, pady=(12, 6))

    tk.Label(entry_frame, text="Date (YYYY-MM-DD):").grid(row=0, column=0, sticky="w")
    date_entry = tk.Entry(entry_frame, width=12)
    date_entry.insert(0, now.strftime("%Y-%m-%d"))
    date_entry.grid(row=0, column=1, sticky="w")

    tk.Label(entry_frame, text="Time (HH mm):").grid(row=0, column=2, sticky="w", padx=(12, 0))
    hour_entry = tk.Entry(entry_frame, width=4)
    hour_entry.insert(0, now.strftime("%H"))
    hour_entry.grid(row=0, column=3)
    minute_entry = tk.Entry(entry_frame, width=4)
    minute_entry.insert(0, now.strftime("%M"))
    minute_entry.grid(row=0, column=4)

    tk.Label(entry_frame, text=f"Price ({CURRENCY_LABEL}):").grid(row=1, column=0, sticky="w", pady=(6, 0))
    price_entry = tk.Entry(entry_frame, width=16)
    price_entry.grid(row=1, column=1, columnspan=2, sticky="w", pady=(6, 0))

    # Eingabe: Chat-Text einfügen
    paste_frame = tk.LabelFrame(root, text="Paste chat", padx=8, pady=8)
    paste_frame.pack(fill="x", padx=12, pady=6)
    paste_text = tk.Text(paste_frame, height=6, wrap="word")
    paste_text.pack(fill="x")

    # Übersicht
    stats_var = tk.StringVar()

    tree_frame = tk.Frame(root)
    tree_frame.pack(fill="both", expand=True, padx=12, pady=6)
    tree_frame.grid_columnconfigure(0, weight=1)
    tree_frame.grid_rowconfigure(0, weight=1)

    columns = ("timestamp", "price")
    tree = ttk.Treeview(tree_frame, columns=columns, show="headings")
    tree.heading("timestamp", text="When")
    tree.heading("price", text=f"Price ({CURRENCY_LABEL})")
    tree.column("timestamp", width=180, anchor="w")
    tree.column("price", width=160, anchor="e")
    vsb = ttk.Scrollbar(tree_frame, orient="vertical", command=tree.yview)
    tree.configure(yscrollcommand=vsb.set)
    tree.grid(row=0, column=0, sticky="nsew")
    vsb.grid(row=0, column=1, sticky="ns")

    tk.Label(root, textvariable=stats_var, anchor="w", font=("Arial", 10, "bold")).pack(fill="x", padx=12)

    def refresh():
        tree.delete(*tree.get_children())
        for drop in tracker.drops:
            tree.insert("", "end", values=(drop.timestamp.strftime("%Y-%m-%d %H:%M"), drop.price_display))
        stats = tracker.stats
        stats_var.set(
            f"Drops: {stats['count']}   Total: {format_gp(stats['total'])}   Average: {format_gp(stats['average'])}"
        )

    def add_drop():
        ts = parse_manual_timestamp(date_entry.get(), hour_entry.get(), minute_entry.get())
        if ts is None:
            messagebox.showerror("Add drop", "Choose a date (YYYY-MM-DD) and enter the time as HH and mm.")
            return
        price = parse_manual_price(price_entry.get())
        if price is None:
            messagebox.showerror("Add drop", f"Enter a price in {CURRENCY_LABEL}.")
            return
        tracker.add_manual(ts, price)
        price_entry.delete(0, tk.END)
        refresh()

    def parse_paste():
        text = paste_text.get("1.0", tk.END)
        if not text.strip():
            return
        _, count = tracker.import_from_text(text)
        refresh()
        messagebox.showinfo("Import", f"Imported {count} shard(s).")

    def save():
        if not messagebox.askyesno(
            "Confirm Save",
            f"Save now? This will overwrite {tracker.store.path}.",
        ):
            return
        result = tracker.save()
        if result.ok:
            messagebox.showinfo("Save", "Saved.")
        else:
            messagebox.showerror("Save", f"Save failed: {result.error}")

    def load():
        result = tracker.load()
        if result.status == STATUS_NOT_FOUND:
            messagebox.showinfo("Load", f"No saved drops found at {tracker.store.path}.")
            return
        if not result.ok:
            messagebox.showerror("Load", f"Failed to load: {result.error}")
            return
        refresh()

    def clear_all():
        if not messagebox.askyesno("Confirm", "Delete all drops?"):
            return
        tracker.clear()
        refresh()

    def export_csv():
        try:
            df = drops_to_frame(tracker.drops)
            if df.empty:
                messagebox.showinfo("Export", "Nothing to export.")
                return
            path = f"export_{int(time.time())}.csv"
            df.to_csv(path, index=False)
            messagebox.showinfo("Export", f"CSV exported: {path}")
        except Exception as e:
            log_debug(f"[EXPORT] CSV failed: {e}")
            messagebox.showerror("Export", str(e))

    def export_json():
        try:
            df = drops_to_frame(tracker.drops)
            if df.empty:
                messagebox.showinfo("Export", "Nothing to export.")
                return
            path = f"export_{int(time.time())}.json"
            df.to_json(path, orient='records', date_format='iso', force_ascii=False)
            messagebox.showinfo("Export", f"JSON exported: {path}")
        except Exception as e:
            log_debug(f"[EXPORT] JSON failed: {e}")
            messagebox.showerror("Export", str(e))

    def show_price_plot():
        try:
            df = drops_to_frame(tracker.drops)
            if df.empty:
                messagebox.showinfo("Chart", "No drops yet.")
                return
            df = df.sort_values("timestamp", kind="stable")
            plt.figure(figsize=(10, 5))
            plt.plot(df["timestamp"], df["price_gp"], marker='o', label="Price")
            plt.plot(df["timestamp"], df["price_gp"].cumsum(), linestyle="--", label="Running total")
            plt.title("Blood shard prices")
            plt.xlabel("Time")
            plt.ylabel(f"Price ({CURRENCY_LABEL})")
            plt.legend()
            plt.tight_layout()
            plt.show()
        except Exception as e:
            log_debug(f"[CHART] failed: {e}")
            messagebox.showerror("Chart", str(e))

    button_frame = tk.Frame(root)
    button_frame.pack(fill="x", padx=12, pady=(0, 12))
    tk.Button(entry_frame, text="Add", command=add_drop).grid(row=1, column=3, columnspan=2, pady=(6, 0))
    tk.Button(paste_frame, text="Parse", command=parse_paste).pack(pady=(6, 0))
    tk.Button(button_frame, text="Save", command=save).pack(side="left")
    tk.Button(button_frame, text="Load", command=load).pack(side="left", padx=4)
    tk.Button(button_frame, text="Clear all", command=clear_all).pack(side="left")
    tk.Button(button_frame, text="Chart", command=show_price_plot).pack(side="right")
    tk.Button(button_frame, text="Export JSON", command=export_json).pack(side="right", padx=4)
    tk.Button(button_frame, text="Export CSV", command=export_csv).pack(side="right")

    refresh()
    root.mainloop()


if __name__ == "__main__":
    start_gui()
