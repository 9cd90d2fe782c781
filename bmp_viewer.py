import logging
import tkinter as tk
from tkinter import filedialog, messagebox, simpledialog
from PIL import ImageTk

import commands
import viewer_style as style
from bmp_image import Bmp8Image
from preview import HISTOGRAM_COLORS, channel_histograms, plot_histogram_image, to_pil_image

logger = logging.getLogger(__name__)


# ==== BMP Viewer ====
class BMPViewer(tk.Frame):
    def __init__(self, master, file_path=None):
        super().__init__(master, bg=style.BG_MAIN)
        self.master = master
        self.pack(fill="both", expand=True)

        # Toolbar
        toolbar = tk.Frame(self, bg=style.BG_TOOLBAR, padx=10, pady=8)
        toolbar.pack(side="top", fill="x")
        for text, cmd in (("Open BMP", self.open_bmp), ("Save As", self.save_bmp),
                          ("Zoom In", self.zoom_in), ("Zoom Out", self.zoom_out),
                          ("Histograms", self.show_histograms)):
            tk.Button(toolbar, text=text, command=cmd,
                      bg=style.BG_BUTTON, fg=style.FG_BUTTON,
                      font=style.FONT_BUTTON, relief="flat", padx=10, pady=4).pack(side="left", padx=5)
        self.filter_button = tk.Menubutton(toolbar, text="Filters", relief="flat",
                                           bg=style.BG_BUTTON, fg=style.FG_BUTTON,
                                           font=style.FONT_BUTTON, padx=10, pady=4)
        self.filter_menu = tk.Menu(self.filter_button, tearoff=0)
        self.filter_button["menu"] = self.filter_menu
        self.filter_button.pack(side="left", padx=5)

        # Main Frame
        main_frame = tk.Frame(self, bg=style.BG_MAIN)
        main_frame.pack(fill="both", expand=True, padx=10, pady=10)

        canvas_frame = tk.Frame(main_frame, bg=style.BG_MAIN)
        canvas_frame.pack(side="left", fill="both", expand=True, padx=(0,10))
        self.canvas = tk.Canvas(canvas_frame, bg=style.BG_PANEL, cursor="cross")
        self.canvas.pack(side="left", fill="both", expand=True)
        self.scroll_y = tk.Scrollbar(canvas_frame, orient="vertical", command=self.canvas.yview)
        self.scroll_y.pack(side="right", fill="y")
        self.scroll_x = tk.Scrollbar(main_frame, orient="horizontal", command=self.canvas.xview)
        self.scroll_x.pack(side="bottom", fill="x")
        self.canvas.configure(yscrollcommand=self.scroll_y.set, xscrollcommand=self.scroll_x.set)
        self.canvas.bind("<MouseWheel>", self.on_mousewheel)
        self.canvas.bind("<Button-4>", self.on_mousewheel_linux)
        self.canvas.bind("<Button-5>", self.on_mousewheel_linux)

        # Info Panel
        info_frame = tk.Frame(main_frame, bg=style.BG_PANEL, bd=2, relief="groove", padx=15, pady=15)
        info_frame.pack(side="right", fill="y")
        tk.Label(info_frame, text="Header Info", font=style.FONT_HEADER,
                 bg=style.BG_PANEL, fg=style.FG_TEXT).pack(anchor="w", pady=(0,5))
        self.header_text = tk.Text(info_frame, height=8, width=30,
                                   font=style.FONT_MONO, bg="#f9f9f9", fg="#222",
                                   relief="flat", wrap="none")
        self.header_text.pack(anchor="w", pady=(0,5))
        self.header_text.configure(state="disabled")
        tk.Label(info_frame, text="Color Palette", font=style.FONT_HEADER,
                 bg=style.BG_PANEL, fg=style.FG_TEXT).pack(anchor="w", pady=(10,5))
        self.palette_canvas = tk.Canvas(info_frame, width=256, height=256, bg="#fff", bd=1, relief="solid")
        self.palette_canvas.pack(anchor="w")

        # Vars
        self.bmp = None
        self.tk_img = None
        self.zoom_factor = 1.0
        self.hist_refs = []

        if file_path:
            self.load_bmp(file_path)

    # ==== File Handling ====
    def open_bmp(self):
        file_path = filedialog.askopenfilename(filetypes=[("BMP files","*.bmp")])
        if file_path:
            self.load_bmp(file_path)

    def load_bmp(self, file_path):
        img = commands.open_image(file_path)
        if img is None:
            messagebox.showerror("Error", f"Failed to open BMP file:\n{file_path}\n\n"
                                          "Only uncompressed 8-bit and 24-bit images are supported.")
            return
        self.bmp = img
        self.zoom_factor = 1.0
        self.rebuild_filter_menu()
        self.refresh()

    def save_bmp(self):
        if not self.ensure_image_loaded():
            return
        file_path = filedialog.asksaveasfilename(defaultextension=".bmp", filetypes=[("BMP files","*.bmp")])
        if not file_path:
            return
        if not commands.save_image(self.bmp, file_path):
            messagebox.showerror("Error", f"Failed to save BMP file:\n{file_path}")

    def ensure_image_loaded(self) -> bool:
        if self.bmp is None:
            messagebox.showwarning("No image", "Load a BMP image first.")
            return False
        return True

    # ==== Filters ====
    def rebuild_filter_menu(self):
        self.filter_menu.delete(0, "end")
        for index, entry in enumerate(commands.filter_menu(self.bmp), start=1):
            self.filter_menu.add_command(label=entry.label,
                                         command=lambda i=index: self.run_filter(i))

    def run_filter(self, index: int):
        if not self.ensure_image_loaded():
            return
        entry = commands.filter_menu(self.bmp)[index - 1]
        value = None
        if entry.needs_value:
            if entry.label == "Brightness":
                value = simpledialog.askinteger("Brightness", "Brightness value (-255..255):",
                                                minvalue=-255, maxvalue=255)
            else:
                value = simpledialog.askinteger("Threshold", "Threshold value (0..255):",
                                                minvalue=0, maxvalue=255)
            if value is None:
                return
        commands.apply_filter_by_index(self.bmp, index, value)
        self.refresh()

    # ==== Display & Zoom ====
    def refresh(self):
        self.display_image()
        self.show_header_info()
        self.draw_palette()

    def display_image(self):
        if self.bmp is None:
            return
        img = to_pil_image(self.bmp)
        w = max(1, int(img.width*self.zoom_factor))
        h = max(1, int(img.height*self.zoom_factor))
        self.tk_img = ImageTk.PhotoImage(img.resize((w,h)))
        self.canvas.delete("all")
        self.canvas.create_image(0,0, anchor="nw", image=self.tk_img)
        self.canvas.config(scrollregion=self.canvas.bbox("all"))

    def zoom_in(self): self.zoom_factor*=1.25; self.display_image()
    def zoom_out(self): self.zoom_factor/=1.25; self.display_image()
    def on_mousewheel(self,event): self.zoom_in() if event.delta>0 else self.zoom_out()
    def on_mousewheel_linux(self,event):
        if event.num==4: self.zoom_in()
        elif event.num==5: self.zoom_out()

    # ==== Header info ====
    def show_header_info(self):
        text = "\n".join(f"{k}: {v}" for k, v in commands.image_info(self.bmp).items())
        self.header_text.configure(state="normal")
        self.header_text.delete("1.0","end")
        self.header_text.insert("1.0",text)
        self.header_text.configure(state="disabled")

    # ==== Palette ====
    def draw_palette(self):
        self.palette_canvas.delete("all")
        if not isinstance(self.bmp, Bmp8Image):
            return
        cols=16; cell=16
        for i,(r,g,b) in enumerate(self.bmp.palette):
            x=(i%cols)*cell; y=(i//cols)*cell
            self.palette_canvas.create_rectangle(x,y,x+cell,y+cell, fill=f"#{r:02x}{g:02x}{b:02x}", outline="")

    # ==== Histograms ====
    def show_histograms(self):
        if not self.ensure_image_loaded():
            return
        top = tk.Toplevel(self)
        top.title("Histograms")
        self.hist_refs.clear()
        hists = channel_histograms(self.bmp)
        for name, color in HISTOGRAM_COLORS:
            frame = tk.Frame(top, bg=style.BG_MAIN)
            frame.pack(side="left", padx=5, pady=5)
            tk.Label(frame, text=f"{name} Histogram", bg=style.BG_MAIN).pack()
            hist_img = ImageTk.PhotoImage(plot_histogram_image(hists[name], color=color, width=256, height=160))
            tk.Label(frame, image=hist_img, bg=style.BG_MAIN).pack()
            self.hist_refs.append(hist_img)


# ==== Main ====
if __name__=="__main__":
    import sys
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    root=tk.Tk()
    root.title("BMP Editor")
    root.geometry("1100x700")
    app=BMPViewer(root, sys.argv[1] if len(sys.argv) > 1 else None)
    root.mainloop()
