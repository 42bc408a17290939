from itermap import ExpressionMap, solve, stability, symbolic_derivative
from itermap.plot import cobweb, export

# Ricker map y -> y*exp(a*(1 - y))
expr = "y*exp(a*(1 - y))"
print("f'(y) =", symbolic_derivative(expr))

for a in (0.8, 1.8, 2.2, 2.7):
    f = ExpressionMap(expr, params={"a": a}, bounds=(0.0, 3.0))
    res = solve(f, y0=0.2, max_iter=2000, warn=False)
    report = stability(f, 1.0)
    print(f"a={a}: {res}; y*=1 is {report.label} (f'={report.derivative:.3f})")

cobweb(f=ExpressionMap(expr, params={"a": 2.2}, bounds=(0.0, 3.0)), x0=0.2, steps=40, title="Ricker map, a=2.2")
export.show()
