from itermap import LogisticMap, generate, solve, stability, trace
from itermap.plot import series, export, cobweb

f = LogisticMap(r=1.5, K=10.0)

traj = generate(f, y0=0.001, steps=40)
res = solve(f, y0=0.001)
print(res)
print(stability(f, res.value))

tr = trace(f, 0.001, steps=12)

series.plot(
    traj,
    xlabel="n",
    ylabel="$y_n$",
    title="Logistic growth (r=1.5, K=10)",
)

cobweb(
    f=f,
    trace=tr,
    xlim=(0, 10),
    color="green",
    stair_color="orange",
    identity_color="red",
    title="Cobweb diagram",
)

export.show()
