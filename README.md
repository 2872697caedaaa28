# kinestudy

A small library for studying electron kinematics in reconstructed
particle-physics events. It takes rows of reconstructed particles held in
memory, selects the trigger electron of each event, fills histograms before
and after cuts, and saves plots of them. It also has terminal progress
displays that refresh from a background thread.

It needs Python 3.10 or newer and matplotlib.

## Modules

- **`kinestudy.constants`**: particle masses in GeV, such as `ELECTRON_MASS`,
  `PROTON_MASS`, `NEUTRON_MASS`, `PION_MASS` and `KAON_MASS`.
- **`kinestudy.particle`**: `Particle`, a frozen record of a reconstructed
  track. It holds PDG code, status, index, charge, mass, momentum, energy,
  vertex, `beta` and `chi2pid`. Equality, ordering and hashing follow
  `index`. It provides these derived quantities:
  - `p()` and `pt()`.
  - `phi()` and `theta()`, in degrees.
  - `opening_angle(other)`, in radians.
  - The vertex radii `r()` and `rho()`.
  - Tuples from `momentum_vector()`, `four_momentum()`, `vertex_vector()`
    and `vertex_four_vector()`.
- **`kinestudy.helpers`**: general helpers.
  - Electron choice: `find_trigger_electron`, `find_most_energetic_electron`.
  - Kinematics: `compute_energy`, `mod`, `warp_neg_pos_pi`.
  - Collections: `generate_unique_pairs`.
  - Binning and formatting: `find_binning`, `format_string`.
  - Files: `read_recursive_file_in_directory`.
- **`kinestudy.banks`**: a column-oriented `Bank` table with `rows()` and
  `get(name, row)`, and `load_bank_by_index`. It also has readers for the
  detector response of one particle:
  - `read_cherenkov_bank` returns a `CherenkovBank` (detector 15).
  - `read_calorimeter_bank` returns a `CalorimeterBank` (detector 7). Its
    `pcal`, `inner` and `outer` layers (layers 1, 4 and 7) are
    `CalorimeterStruct` records.
- **`kinestudy.histograms`**: fixed-binning histograms and their containers.
  - `Histogram1D` and `Histogram2D` keep under- and overflow.
  - `ThreadedHistogram` gives each thread its own histogram and sums them
    in `merge()`.
  - `Histograms` and `ElectronHistograms` hold the study's electron
    histograms, before and after cuts.
- **`kinestudy.plotting`**: matplotlib drawing.
  - Canvas handling: `make_canvas`, `save_canvas`.
  - Drawing: `draw_hist1d`, `draw_hist1d_pair`, `draw_hist2d`.
  - Styling: `OptionTH1`, `OptionTH2`, `Figsize` and the `Color` palette.
  - Also `linspace`.
- **`kinestudy.display`**: background-thread terminal displays.
  - `AnimationDisplay`, with the `AnimationStyle` built-ins.
  - `StatusDisplay`, whose `message` can be changed while it runs.
  - `CounterDisplay`, with an optional `Speedometer`.
- **`kinestudy.progressbar`**: `ProgressBarDisplay`, with the
  `ProgressBarStyle` looks or custom `BarParts`. It also has
  `CompositeDisplay` (or `composite(...)`) to draw several displays on one
  line, and `IterableBar` to wrap a loop.
- **`kinestudy.multithread`**: `multithread_reader(reader, files, cores=6)`.
  It calls `reader` on each input in a thread pool and shows a progress bar
  while the work runs. It returns the results in input order and raises the
  first error again once all the work is done.
- **`kinestudy.study`**: the electron study, made of `ElectronCuts`,
  `Reader` and `Drawing`.

## Helpers

```python
from kinestudy.helpers import compute_energy, format_string, generate_unique_pairs, mod, warp_neg_pos_pi

compute_energy(0.0, 0.0, 1.0, 11)  # electron energy; unknown PDG codes give NaN
mod(-1.0, 360.0)                   # 359.0, always in [0, y) for positive y
warp_neg_pos_pi(190.0)             # 10.0, shifts degrees into [-180, 180)
generate_unique_pairs([1, 2, 3])   # [(1, 2), (1, 3), (2, 3)]
format_string(3.14159, 3)          # '3.142'
```

`find_binning(values, num_bins=6)` returns equal-population bin edges. Each
edge is rounded up to two decimals. The function also prints the edges. It
raises `ValueError` in these cases:

- `values` is empty.
- `num_bins` is not positive.
- There are more bins than values.

## The electron study

Each event is a mapping from bank name to `Bank`:

- `"REC::Particle"` is required.
- `"REC::Calorimeter"`, `"REC::Cherenkov"` and `"REC::Event"` are optional.

The particle bank needs these columns: `pid`, `status`, `charge`, `px`, `py`,
`pz`, `vx`, `vy`, `vz`, `vt`, `beta` and `chi2pid`.

```python
from kinestudy.banks import Bank
from kinestudy.histograms import Histograms
from kinestudy.study import Drawing, ElectronCuts, Reader

config = {"electron": {"vz_min": -10.0, "vz_max": 5.0, "chi2_min": -3.0, "chi2_max": 3.0}}
cuts = ElectronCuts.from_config(config)

particles = Bank({
    "pid": [11], "status": [-2010], "charge": [-1],
    "px": [0.5], "py": [0.3], "pz": [4.0],
    "vx": [0.0], "vy": [0.0], "vz": [-2.0], "vt": [0.0],
    "beta": [1.0], "chi2pid": [0.4],
})

histograms = Histograms()
reader = Reader(histograms, cuts)
reader([{"REC::Particle": particles}])   # returns 1: the number of events with particles

Drawing(histograms, cuts, path="plots/electron").draw_electron_kinematics()
```

For each event, `Reader` does the following:

1. It keeps the particle rows with PID 11 as electrons.
2. It takes the first electron with negative status as the trigger
   electron. The event is skipped if that electron has zero momentum.
3. It applies two cuts:
   - `chi2pid` must lie in the open interval (`chi2_min`, `chi2_max`).
   - `vz` must lie in the closed interval [`vz_min`, `vz_max`].

Histogram filling works like this:

- Every trigger electron fills the uncut histograms.
- The `vz` "cut" histogram is filled when the χ² cut passes.
- The χ² "cut" histogram is filled when the `vz` cut passes.
- The momentum, φ and θ "cut" histograms are filled only when both cuts
  pass.

A missing configuration key leaves its bound at NaN, which rejects every
electron.

`Reader` can also be used one event at a time through `process_event(event)`.
It returns `True` when the trigger electron passes both cuts.

`Drawing.draw_electron_kinematics()` merges each threaded histogram. It
overlays the distributions before and after cuts, draws the cut values as
red lines, and saves every figure with `save_canvas`. Each figure is saved
as `<path>/pdf/<name>.pdf`, `<path>/svg/<name>.svg` and
`<path>/png/<name>.png`. The default path is `../plots/electron/`. The call
returns the list of saved paths.

## Progress displays

```python
from kinestudy.progressbar import IterableBar

for item in IterableBar(range(1000), message="Working"):
    ...
```

Every display is a context manager: `show()` runs on entry and `done()` on
exit. Displays take a callable that returns the value to watch:

```python
from kinestudy.display import CounterDisplay

count = 0
with CounterDisplay(lambda: count, message="Events", speed=0.1, show=False):
    for _ in range(10_000):
        count += 1
```

## What it does not do

- It has no reader for event files on disk. `Reader` works only on events
  already held in memory as `Bank` tables.
  `read_recursive_file_in_directory` only lists the paths whose names
  contain `.hipo`.
- It does not parse configuration files. `ElectronCuts.from_config` takes a
  mapping that is already loaded.
- It installs no command-line program. The study is run from Python.