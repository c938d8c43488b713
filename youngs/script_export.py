"""Generate a MATLAB plotting script that reproduces the stress-strain fit."""

from __future__ import annotations

import os

from .analysis import LeverAnalysis
from .reporting import SCRIPT_LITERAL

MATLAB_TEMPLATE = """\
% --------------------------------------------------------
% Young's modulus (optical lever) data processing and plot
% --------------------------------------------------------

%% 1. Experiment parameters (SI units: m and kg)
g = {g};         % gravitational acceleration (m/s^2)
D = {D};     % mirror-to-scale distance (m)
L = {L};     % original wire length (m)
b = {b};     % optical lever arm (m)
d_avg = {d_avg}; % average wire diameter (m)

%% 2. Processed data (stress Sigma and strain Epsilon)
% Stress Sigma (Pa)
Sigma = [{sigma}];
% Strain Epsilon (dimensionless)
Epsilon = [{epsilon}];

%% 3. Linear regression (least squares)
% Model: Sigma = Y * Epsilon + Intercept
P = polyfit(Epsilon, Sigma, 1);
Y_fit = P(1);     % Young's modulus (Pa)
Intercept = P(2); % intercept

%% 4. Stress-strain plot
figure('Name', 'Stress-Strain Relationship Plot');
hold on;
scatter(Epsilon, Sigma, 80, 'b', 'o', 'filled', 'MarkerFaceAlpha', 0.7);
X_fit = linspace(min(Epsilon)*0.9, max(Epsilon)*1.1, 100);
Y_fit_line = Y_fit * X_fit + Intercept;
plot(X_fit, Y_fit_line, 'r--', 'LineWidth', 2);
title('Stress-strain (\\sigma-\\epsilon) relationship', 'FontSize', 14);
xlabel('Strain (\\epsilon)', 'FontSize', 12);
ylabel('Stress (\\sigma) (Pa)', 'FontSize', 12);
Y_fit_formatted = sprintf('%.3e', Y_fit);
legend('Experimental data', ['Linear fit (Y=', Y_fit_formatted, ' Pa)'], 'Location', 'northwest', 'FontSize', 10);
grid on;
box on;
hold off;

fprintf('Fitted Young''s modulus Y = %.3e Pa (this run: {slope})\\n', Y_fit);
% --------------------------------------------------------
"""


def generate_matlab_script(analysis: LeverAnalysis) -> str:
    """Return MATLAB source that refits and plots the stress-strain points.

    Args:
        analysis (LeverAnalysis): Result bundle whose parameters and points
            are embedded as literals.

    Returns:
        str: Script text. The script is independent of this package; it only
        carries the numbers.
    """
    derived = analysis.derived
    return MATLAB_TEMPLATE.format(
        g=f"{analysis.config.g:g}",
        D=SCRIPT_LITERAL(derived.D_m),
        L=SCRIPT_LITERAL(derived.L_m),
        b=SCRIPT_LITERAL(derived.b_m),
        d_avg=SCRIPT_LITERAL(derived.d_avg_m),
        sigma=" ".join(SCRIPT_LITERAL(p.stress_pa) for p in analysis.points),
        epsilon=" ".join(SCRIPT_LITERAL(p.strain) for p in analysis.points),
        slope=f"{analysis.modulus:.3e}",
    )


def write_matlab_script(analysis: LeverAnalysis, output_dir: str) -> str:
    """Write the MATLAB script to ``youngs_modulus_plot.m`` and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "youngs_modulus_plot.m")
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(generate_matlab_script(analysis))
    return path
