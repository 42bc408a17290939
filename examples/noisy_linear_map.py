import matplotlib.pyplot as plt

from itermap import LinearMap, generate_stochastic
from itermap.plot import series, analysis, export

f = LinearMap(alpha=8.0, beta=0.8)

# same seed -> same noise series
traj = generate_stochastic(f, y0=0.001, steps=100, noise_variance=4.0, seed=2024)
print(traj)
print("fixed point:", f.fixed_points()[0])

fig, ax = plt.subplots(1, 2, figsize=(12, 4.5), layout="constrained")
series.plot(traj, ax=ax[0], title="y = 8 + 0.8 y with noise", label="observed")
analysis.hist(traj, ax=ax[1], bins=20, xlabel="noise", title="Noise series")

export.savefig(fig, "figures/noisy_linear_map", fmts=("png", "pdf"))
export.show()
